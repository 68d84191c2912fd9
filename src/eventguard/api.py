"""FastAPI REST API for eventguard analysis and fixes."""

from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .config import AnalyzerConfig, load_config
from .errors import (
    ConfigNotFoundError,
    DeclarationNotFoundError,
    EventguardError,
    FixNotAvailableError,
    InvalidConfigError,
    InvalidSchemaVersionError,
    UnsupportedLanguageError,
)
from .fixes import IMPLEMENT_RAISE_METHOD, REMOVE_VIRTUAL
from .host import Engine
from .models import Diagnostic


# --- Pydantic Schemas ---


class SpanSchema(BaseModel):
    start_byte: int
    end_byte: int
    line: int = 0
    column: int = 0


class DiagnosticSchema(BaseModel):
    id: str
    kind: str  # "field"|"property"
    event_name: str = ""
    message: str = ""
    severity: str = "warning"
    span: SpanSchema


class DescriptorSchema(BaseModel):
    id: str
    kind: str
    title: str
    message_format: str
    description: str
    category: str
    severity: str
    enabled_by_default: bool


class DocumentRequest(BaseModel):
    """A source document to analyze."""

    source: str
    path: str = Field(default="Document.cs", description="File name; selects the parser")


class FixListRequest(DocumentRequest):
    diagnostic: DiagnosticSchema


class FixRequest(FixListRequest):
    equivalence_key: str = Field(
        default=REMOVE_VIRTUAL,
        description=f"'{REMOVE_VIRTUAL}' or '{IMPLEMENT_RAISE_METHOD}'",
    )


class FixAllRequest(DocumentRequest):
    equivalence_key: str = REMOVE_VIRTUAL


class AnalyzeResponse(BaseModel):
    path: str
    diagnostics: list[DiagnosticSchema]
    count: int
    has_syntax_errors: bool


class CodeActionSchema(BaseModel):
    title: str
    equivalence_key: str


class FixListResponse(BaseModel):
    actions: list[CodeActionSchema]


class FixResponse(BaseModel):
    path: str
    source: str


class FixAllResponse(FixResponse):
    applied: int
    skipped: int


# --- Helper Functions ---


@lru_cache(maxsize=1)
def get_config() -> AnalyzerConfig:
    """Load the config once per process."""
    return load_config()


def get_engine(config: AnalyzerConfig = Depends(get_config)) -> Engine:
    return Engine(config)


def diagnostic_to_schema(diagnostic: Diagnostic) -> DiagnosticSchema:
    """Convert dataclass Diagnostic to Pydantic schema."""
    return DiagnosticSchema(**diagnostic.to_dict())


def schema_to_diagnostic(schema: DiagnosticSchema) -> Diagnostic:
    return Diagnostic.from_dict(schema.model_dump())


# --- App Setup ---


app = FastAPI(
    title="eventguard API",
    description="REST API for finding and fixing virtual C# events",
    version=__version__,
)


# --- Global Exception Handler ---


# Map exception types to HTTP status codes
ERROR_STATUS_CODES: dict[type, int] = {
    UnsupportedLanguageError: 400,
    DeclarationNotFoundError: 404,
    FixNotAvailableError: 422,
    ConfigNotFoundError: 500,
    InvalidConfigError: 500,
    InvalidSchemaVersionError: 500,
}


@app.exception_handler(EventguardError)
async def eventguard_error_handler(request: Request, exc: EventguardError) -> JSONResponse:
    """Map EventguardError subclasses to appropriate HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


# --- Endpoints ---


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/api/rules", response_model=list[DescriptorSchema])
def list_rules(engine: Engine = Depends(get_engine)):
    """Every diagnostic this service can report."""
    return [DescriptorSchema(**d.to_dict()) for d in engine.rule.supported_diagnostics]


@app.post("/api/analyze", response_model=AnalyzeResponse)
def analyze(request: DocumentRequest, engine: Engine = Depends(get_engine)):
    tree = engine.parse(request.source, request.path)
    diagnostics = engine.analyze(tree)
    return AnalyzeResponse(
        path=request.path,
        diagnostics=[diagnostic_to_schema(d) for d in diagnostics],
        count=len(diagnostics),
        has_syntax_errors=tree.has_errors,
    )


@app.post("/api/fixes", response_model=FixListResponse)
def list_fixes(request: FixListRequest, engine: Engine = Depends(get_engine)):
    """Actions available for one diagnostic."""
    tree = engine.parse(request.source, request.path)
    actions = engine.fixes(schema_to_diagnostic(request.diagnostic), tree)
    return FixListResponse(
        actions=[
            CodeActionSchema(title=a.title, equivalence_key=a.equivalence_key)
            for a in actions
        ]
    )


@app.post("/api/fix", response_model=FixResponse)
def apply_fix(request: FixRequest, engine: Engine = Depends(get_engine)):
    """Apply one action to one diagnostic and return the new source."""
    tree = engine.parse(request.source, request.path)
    new_tree = engine.apply_fix(
        tree, schema_to_diagnostic(request.diagnostic), request.equivalence_key
    )
    return FixResponse(path=request.path, source=new_tree.text)


@app.post("/api/fix-all", response_model=FixAllResponse)
def apply_fix_all(request: FixAllRequest, engine: Engine = Depends(get_engine)):
    """Apply one action to every diagnostic in the document."""
    tree = engine.parse(request.source, request.path)
    result = engine.fix_all(tree, request.equivalence_key)
    return FixAllResponse(
        path=request.path,
        source=result.tree.text,
        applied=len(result.applied),
        skipped=len(result.skipped),
    )
