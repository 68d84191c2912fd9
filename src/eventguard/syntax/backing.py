"""Discovery of the delegate field behind an accessor-like event."""

from __future__ import annotations

import logging

import tree_sitter

from ..errors import ResolutionError
from .matcher import AccessorLikeEvent
from .tree import SyntaxTree

logger = logging.getLogger(__name__)

ACCESSOR_PARAMETER = "value"


def resolve_backing_identifier(tree: SyntaxTree, event: AccessorLikeEvent) -> str:
    """Find the field handlers are chained onto in the add accessor.

    The first statement of the form `<field> += value;` wins. `<field>` may
    be a bare identifier or `this.<identifier>` and is returned as written.

    Raises:
        ResolutionError: If no add-accessor statement has that form.
    """
    for statement in event.add_statements:
        assignment = _assignment_of(statement)
        if assignment is None:
            continue
        identifier = _subscription_target(tree, assignment)
        if identifier is not None:
            logger.debug("Event %s is backed by %s", event.name, identifier)
            return identifier
    raise ResolutionError(event.name)


def _assignment_of(statement: tree_sitter.Node) -> tree_sitter.Node | None:
    if statement.type == "assignment_expression":
        return statement
    if statement.type == "expression_statement" and statement.named_children:
        expr = statement.named_children[0]
        if expr.type == "assignment_expression":
            return expr
    return None


def _subscription_target(
    tree: SyntaxTree, assignment: tree_sitter.Node
) -> str | None:
    """Left operand of `<left> += value`, or None for any other assignment."""
    left = assignment.child_by_field_name("left")
    right = assignment.child_by_field_name("right")
    if left is None or right is None:
        return None
    if _operator_text(tree, assignment, left, right) != "+=":
        return None
    if right.type != "identifier" or tree.node_text(right) != ACCESSOR_PARAMETER:
        return None

    if left.type == "identifier":
        return tree.node_text(left)
    if left.type == "member_access_expression":
        target = left.child_by_field_name("expression")
        name = left.child_by_field_name("name")
        if (
            target is not None
            and name is not None
            and tree.node_text(target) == "this"
            and name.type == "identifier"
        ):
            return f"this.{tree.node_text(name)}"
    return None


def _operator_text(
    tree: SyntaxTree,
    assignment: tree_sitter.Node,
    left: tree_sitter.Node,
    right: tree_sitter.Node,
) -> str:
    operator = assignment.child_by_field_name("operator")
    if operator is not None:
        return tree.node_text(operator)
    # Older grammars wrap the operator in an unnamed-field node between the operands
    for child in assignment.children:
        if child.start_byte >= left.end_byte and child.end_byte <= right.start_byte:
            return tree.node_text(child)
    return ""
