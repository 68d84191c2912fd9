"""Add and remove single modifier tokens on a declaration."""

from __future__ import annotations

import tree_sitter

from ..errors import ModifierNotFoundError
from .tree import SyntaxTree, TextEdit

VIRTUAL = "virtual"

_HORIZONTAL_SPACE = (b" ", b"\t")


def modifier_nodes(decl: tree_sitter.Node) -> list[tree_sitter.Node]:
    """Direct modifier children of a declaration, in source order."""
    return [child for child in decl.children if child.type == "modifier"]


def modifiers_of(tree: SyntaxTree, decl: tree_sitter.Node) -> tuple[str, ...]:
    """Modifier keywords of a declaration (e.g. ("public", "virtual"))."""
    return tuple(tree.node_text(node) for node in modifier_nodes(decl))


def find_modifier(
    tree: SyntaxTree, decl: tree_sitter.Node, modifier: str
) -> tree_sitter.Node:
    """Find the token for `modifier` on `decl`.

    Raises:
        ModifierNotFoundError: If the declaration does not carry it.
    """
    for node in modifier_nodes(decl):
        if tree.node_text(node) == modifier:
            return node
    raise ModifierNotFoundError(modifier)


def removal_edit(tree: SyntaxTree, decl: tree_sitter.Node, modifier: str) -> TextEdit:
    """Edit deleting `modifier` and the whitespace separating it from the next token."""
    token = find_modifier(tree, decl, modifier)
    start, end = token.start_byte, token.end_byte
    source = tree.source
    while end < len(source) and source[end:end + 1] in _HORIZONTAL_SPACE:
        end += 1
    if end == token.end_byte:
        # Last token on its line: take the separator before it instead
        lead = start
        while lead > 0 and source[lead - 1:lead] in _HORIZONTAL_SPACE:
            lead -= 1
        if lead > 0 and source[lead - 1:lead] not in (b"\n", b"\r"):
            start = lead
    return TextEdit(start=start, end=end, replacement=b"")


def remove_modifier(
    tree: SyntaxTree, decl: tree_sitter.Node, modifier: str = VIRTUAL
) -> SyntaxTree:
    """Return a new tree with one modifier token removed from `decl`.

    All other tokens, their order and the surrounding formatting are kept.
    """
    return tree.with_edit(removal_edit(tree, decl, modifier))


def add_modifier(
    tree: SyntaxTree, decl: tree_sitter.Node, modifier: str
) -> SyntaxTree:
    """Return a new tree with `modifier` appended after the existing modifiers.

    Adding a modifier that is already present returns the tree unchanged.
    """
    if modifier in modifiers_of(tree, decl):
        return tree
    anchor = next(
        child
        for child in decl.children
        if child.type not in ("attribute_list", "modifier")
    )
    edit = TextEdit(
        start=anchor.start_byte,
        end=anchor.start_byte,
        replacement=f"{modifier} ".encode(),
    )
    return tree.with_edit(edit)
