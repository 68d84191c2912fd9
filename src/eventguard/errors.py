"""Custom exceptions for eventguard."""


class EventguardError(Exception):
    """Base exception for all eventguard errors."""

    pass


class ConfigNotFoundError(EventguardError):
    """Raised when an explicitly requested config file doesn't exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Config not found at {path}")


class InvalidConfigError(EventguardError):
    """Raised when a config or message table file cannot be used."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config {path}: {reason}")


class InvalidSchemaVersionError(EventguardError):
    """Raised when config has an unsupported schema version."""

    def __init__(self, found: int, supported: int):
        self.found = found
        self.supported = supported
        super().__init__(
            f"Unsupported schema version {found}. This tool supports version {supported}."
        )


class UnsupportedLanguageError(EventguardError):
    """Raised when a file's language has no parser."""

    def __init__(self, language: str, supported: list[str], hint: str | None = None):
        self.language = language
        self.supported = supported
        self.hint = hint
        msg = f"Unsupported language: {language}. Supported: {', '.join(supported)}"
        if hint:
            msg = f"{msg}. {hint}"
        super().__init__(msg)


class ResolutionError(EventguardError):
    """Raised when no backing field can be found in an event's add accessor."""

    def __init__(self, event_name: str):
        self.event_name = event_name
        super().__init__(
            f"Cannot resolve backing field for event '{event_name}': "
            "no '<field> += value' statement in its add accessor"
        )


class MalformedElementTypeError(EventguardError):
    """Raised when an event type is not a single-argument generic type."""

    def __init__(self, event_name: str, type_text: str):
        self.event_name = event_name
        self.type_text = type_text
        super().__init__(
            f"Event '{event_name}' has type '{type_text}', "
            "expected a generic type with exactly one type argument"
        )


class MultipleDeclaratorsError(EventguardError):
    """Raised when a raise method is requested for a multi-variable event statement."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(
            f"Event statement declares {len(names)} events ({', '.join(names)}); "
            "a raise method can only be extracted for a single event"
        )


class DeclarationNotFoundError(EventguardError):
    """Raised when a declaration cannot be re-located in a tree."""

    def __init__(self, start_byte: int, kind: str | None = None):
        self.start_byte = start_byte
        self.kind = kind
        what = kind or "event declaration"
        super().__init__(f"No {what} found at offset {start_byte}")


class ModifierNotFoundError(EventguardError):
    """Raised when a declaration does not carry the requested modifier."""

    def __init__(self, modifier: str):
        self.modifier = modifier
        super().__init__(f"Declaration has no '{modifier}' modifier")


class FixNotAvailableError(EventguardError):
    """Raised when a requested fix is not offered for a diagnostic."""

    def __init__(self, diagnostic_id: str, equivalence_key: str):
        self.diagnostic_id = diagnostic_id
        self.equivalence_key = equivalence_key
        super().__init__(f"Fix '{equivalence_key}' is not available for {diagnostic_id}")


class AnalysisCancelledError(EventguardError):
    """Raised when the host cancels an analysis pass between nodes."""

    def __init__(self, analyzed: int):
        self.analyzed = analyzed
        super().__init__(f"Analysis cancelled after {analyzed} declaration(s)")
