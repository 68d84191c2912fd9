"""Recognition of field-like and accessor-like event declarations."""

from __future__ import annotations

from dataclasses import dataclass, field

import tree_sitter

from ..models import FIELD_EVENT, PROPERTY_EVENT, Span
from .modifiers import VIRTUAL, modifiers_of
from .tree import EVENT_DECLARATION, EVENT_FIELD_DECLARATION, SyntaxTree


@dataclass(frozen=True)
class GenericType:
    """A generic type such as EventHandler<ChangedArgs>."""

    name: str
    arguments: tuple[str, ...]
    text: str

    @property
    def single_argument(self) -> str | None:
        return self.arguments[0] if len(self.arguments) == 1 else None


@dataclass(frozen=True)
class OtherType:
    """Any non-generic event type (e.g. a custom delegate name)."""

    text: str


ElementType = GenericType | OtherType


@dataclass(frozen=True)
class Variable:
    """One name declared by a field-like event statement."""

    name: str
    span: Span


@dataclass(frozen=True)
class FieldLikeEvent:
    """`public virtual event EventHandler<T> Changed;`

    The event is its own backing storage. A statement may declare several
    variables; `name` and `name_span` refer to the first.
    """

    name: str
    modifiers: tuple[str, ...]
    element_type: ElementType
    name_span: Span
    variables: tuple[Variable, ...]
    node: tree_sitter.Node = field(compare=False, repr=False)

    kind = FIELD_EVENT

    @property
    def is_virtual(self) -> bool:
        return VIRTUAL in self.modifiers


@dataclass(frozen=True)
class AccessorLikeEvent:
    """`public virtual event EventHandler<T> Changed { add {...} remove {...} }`"""

    name: str
    modifiers: tuple[str, ...]
    element_type: ElementType
    name_span: Span
    add_statements: tuple[tree_sitter.Node, ...] = field(compare=False, repr=False)
    node: tree_sitter.Node = field(compare=False, repr=False)

    kind = PROPERTY_EVENT

    @property
    def is_virtual(self) -> bool:
        return VIRTUAL in self.modifiers


EventDeclaration = FieldLikeEvent | AccessorLikeEvent


def match_event(tree: SyntaxTree, node: tree_sitter.Node) -> EventDeclaration | None:
    """Classify an event member declaration.

    Returns None for anything that is not a class/struct event with one of
    the two recognized shapes.
    """
    if _in_interface(node):
        return None
    if node.type == EVENT_FIELD_DECLARATION:
        return _match_field_like(tree, node)
    if node.type == EVENT_DECLARATION:
        return _match_accessor_like(tree, node)
    return None


def _match_field_like(tree: SyntaxTree, node: tree_sitter.Node) -> FieldLikeEvent | None:
    declaration = _first_child_of_type(node, "variable_declaration")
    if declaration is None:
        return None
    type_node = declaration.child_by_field_name("type")
    if type_node is None:
        return None

    variables: list[Variable] = []
    for child in declaration.children:
        if child.type != "variable_declarator":
            continue
        name_node = child.child_by_field_name("name") or _first_child_of_type(
            child, "identifier"
        )
        if name_node is None:
            continue
        variables.append(Variable(tree.node_text(name_node), tree.span_of(name_node)))

    if not variables or not variables[0].name:
        return None

    return FieldLikeEvent(
        name=variables[0].name,
        modifiers=modifiers_of(tree, node),
        element_type=element_type_of(tree, type_node),
        name_span=variables[0].span,
        variables=tuple(variables),
        node=node,
    )


def _match_accessor_like(
    tree: SyntaxTree, node: tree_sitter.Node
) -> AccessorLikeEvent | None:
    type_node = node.child_by_field_name("type")
    name_node = node.child_by_field_name("name")
    accessors = node.child_by_field_name("accessors") or _first_child_of_type(
        node, "accessor_list"
    )
    if type_node is None or name_node is None or accessors is None:
        return None

    name = tree.node_text(name_node)
    if not name:
        return None

    return AccessorLikeEvent(
        name=name,
        modifiers=modifiers_of(tree, node),
        element_type=element_type_of(tree, type_node),
        name_span=tree.span_of(name_node),
        add_statements=_add_accessor_statements(tree, accessors),
        node=node,
    )


def element_type_of(tree: SyntaxTree, type_node: tree_sitter.Node) -> ElementType:
    """Normalize an event's declared type.

    Qualified generics (System.EventHandler<T>) are reduced to their
    right-most generic name.
    """
    text = " ".join(tree.node_text(type_node).split())
    node = type_node
    if node.type == "qualified_name":
        node = node.child_by_field_name("name") or node.named_children[-1]
    if node.type != "generic_name":
        return OtherType(text)

    name_node = _first_child_of_type(node, "identifier")
    arg_list = _first_child_of_type(node, "type_argument_list")
    if name_node is None or arg_list is None:
        return OtherType(text)

    arguments = tuple(
        "".join(tree.node_text(arg).split())
        for arg in arg_list.named_children
        if arg.type != "comment"
    )
    return GenericType(name=tree.node_text(name_node), arguments=arguments, text=text)


def _add_accessor_statements(
    tree: SyntaxTree, accessors: tree_sitter.Node
) -> tuple[tree_sitter.Node, ...]:
    """Statements of the add accessor; an expression body counts as one statement."""
    for accessor in accessors.named_children:
        if accessor.type != "accessor_declaration":
            continue
        keyword = accessor.child_by_field_name("name") or _first_child_of_type(
            accessor, "add"
        )
        if keyword is None or tree.node_text(keyword) != "add":
            continue
        body = accessor.child_by_field_name("body")
        if body is None:
            body = _first_child_of_type(accessor, "block") or _first_child_of_type(
                accessor, "arrow_expression_clause"
            )
        if body is None:
            return ()
        return tuple(child for child in body.named_children if child.type != "comment")
    return ()


def _in_interface(node: tree_sitter.Node) -> bool:
    container = node.parent.parent if node.parent is not None else None
    return container is not None and container.type == "interface_declaration"


def _first_child_of_type(node: tree_sitter.Node, type_name: str) -> tree_sitter.Node | None:
    for child in node.children:
        if child.type == type_name:
            return child
    return None
