"""Synthesis of protected virtual methods that raise an event."""

from __future__ import annotations

from dataclasses import dataclass

from .config import AnalyzerConfig
from .errors import MalformedElementTypeError, MultipleDeclaratorsError
from .syntax.backing import resolve_backing_identifier
from .syntax.matcher import AccessorLikeEvent, EventDeclaration, FieldLikeEvent, GenericType
from .syntax.tree import SyntaxTree

RAISE_METHOD_MODIFIERS = ("protected", "virtual")


@dataclass(frozen=True)
class RaiseMethod:
    """A method declaration ready to be rendered into C# source.

    The body invokes the backing delegate only when it has subscribers and
    hands the arguments back to the caller.
    """

    name: str
    argument_type: str
    parameter_name: str
    backing_identifier: str
    modifiers: tuple[str, ...] = RAISE_METHOD_MODIFIERS

    @property
    def return_type(self) -> str:
        return self.argument_type

    @property
    def statements(self) -> tuple[str, ...]:
        return (
            f"{self.backing_identifier}?.Invoke(this, {self.parameter_name});",
            f"return {self.parameter_name};",
        )

    def render(self, indent: str = "", indent_unit: str = "    ", newline: str = "\n") -> str:
        """Render the declaration, every line prefixed with `indent`."""
        header = (
            f"{' '.join(self.modifiers)} {self.return_type} "
            f"{self.name}({self.argument_type} {self.parameter_name})"
        )
        lines = [f"{indent}{header}", f"{indent}{{"]
        lines.extend(f"{indent}{indent_unit}{statement}" for statement in self.statements)
        lines.append(f"{indent}}}")
        return newline.join(lines)


def raise_method_name(event_name: str, prefix: str = "Raise", strip: str = "On") -> str:
    """`OnChanged` -> `RaiseChanged`; `Changed` -> `RaiseChanged`.

    Only one leading occurrence of `strip` is removed.
    """
    if strip and event_name.startswith(strip):
        event_name = event_name[len(strip):]
    return f"{prefix}{event_name}"


def build_raise_method(
    event_name: str,
    backing_identifier: str,
    argument_type: str,
    config: AnalyzerConfig | None = None,
) -> RaiseMethod:
    config = config or AnalyzerConfig()
    return RaiseMethod(
        name=raise_method_name(event_name, config.raise_prefix, config.strip_prefix),
        argument_type=argument_type,
        parameter_name=config.args_name,
        backing_identifier=backing_identifier,
    )


def raise_method_for(
    tree: SyntaxTree, event: EventDeclaration, config: AnalyzerConfig | None = None
) -> RaiseMethod:
    """Derive the raise method for a matched event.

    Raises:
        MalformedElementTypeError: If the event type is not Generic<T>.
        MultipleDeclaratorsError: If a field-like statement declares several events.
        ResolutionError: If an accessor-like event has no `<field> += value`.
    """
    element_type = event.element_type
    argument_type = (
        element_type.single_argument if isinstance(element_type, GenericType) else None
    )
    if argument_type is None:
        raise MalformedElementTypeError(event.name, element_type.text)

    if isinstance(event, FieldLikeEvent):
        if len(event.variables) > 1:
            raise MultipleDeclaratorsError([v.name for v in event.variables])
        backing = event.name
    elif isinstance(event, AccessorLikeEvent):
        backing = resolve_backing_identifier(tree, event)
    else:
        raise TypeError(f"Unknown event shape: {type(event).__name__}")

    return build_raise_method(event.name, backing, argument_type, config)
