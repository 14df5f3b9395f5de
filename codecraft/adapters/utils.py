"""
Utility functions for language adapters.
"""

import os
import re
import textwrap

from collections.abc import Collection
from pathlib import Path
from tree_sitter import Language, Node, Parser, Tree


def normalize_ext(ext: str) -> str:
    """Lower-case an extension and strip any leading dots ('.PHP' -> 'php')."""
    return ext.strip().lstrip(".").lower()


def ext_of(file_path: str | Path) -> str:
    return normalize_ext(Path(file_path).suffix)


def read_source(file_path: str | Path) -> str:
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"File does not exist: {file_path}")
    return path.read_text(encoding="utf8")


def indent_block(text: str, indent: str, keep: Collection[int] = ()) -> str:
    """
    Prefix every non-blank line of `text` with `indent`.

    Lines whose index is in `keep` (e.g. lines inside a multi-line string literal) are
    left exactly as they are.
    """
    lines = text.split("\n")
    return "\n".join(
        line if i in keep else indent + line if line.strip() else ""
        for i, line in enumerate(lines)
    )


def dedent_block(text: str, keep: Collection[int] = ()) -> str:
    """Like textwrap.dedent, but lines whose index is in `keep` are neither measured nor changed."""
    lines = text.split("\n")
    margins = [
        leading_whitespace(line)
        for i, line in enumerate(lines)
        if i not in keep and line.strip()
    ]
    margin = os.path.commonprefix(margins) if margins else ""
    return "\n".join(
        line if i in keep else line[len(margin) :] if line.strip() else ""
        for i, line in enumerate(lines)
    )


def body_lines(body: str, indent: str) -> str:
    """Dedent a caller-supplied body and re-indent it for embedding in a block."""
    return indent_block(textwrap.dedent(body).strip("\n"), indent)


def leading_whitespace(line: str) -> str:
    m = re.match(r"^[\t ]*", line)
    return m.group(0) if m else ""


def parse(language: Language, text: str | bytes) -> Tree:
    if isinstance(text, str):
        text = text.encode("utf8")
    return Parser(language).parse(text)


def node_text(node: Node | None) -> str | None:
    if node is None:
        return None
    return node.text.decode("utf8")


def syntax_error_positions(node: Node) -> list[tuple[int, int]]:
    """Collect (row, col) of every ERROR or MISSING node below `node`, in source order."""
    positions = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            positions.append(current.start_point)
            continue
        if current.has_error:
            stack.extend(reversed(current.children))
    return positions


def is_valid_tree(tree: Tree) -> bool:
    return not tree.root_node.has_error


def walk(node: Node):
    """Pre-order traversal of `node` and all of its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def line_prefix(source: bytes, node: Node) -> str:
    """Text between the start of `node`'s line and `node` itself."""
    return source[node.start_byte - node.start_point[1] : node.start_byte].decode("utf8")


def append_to_body(
    content: str, body: Node, member: str, default_indent: str, separator: str = "\n\n"
) -> str:
    """
    Insert `member` as the last entry of a brace-delimited body node.

    The member is indented like the body's first entry, or one `default_indent` deeper
    than the line holding the opening brace when the body is empty.
    """
    source = content.encode("utf8")
    open_brace, close_brace = body.children[0], body.children[-1]
    outer = leading_whitespace(line_prefix(source, open_brace))
    if body.named_children:
        prefix = line_prefix(source, body.named_children[0])
        indent = prefix if prefix and not prefix.strip() else outer + default_indent
        # Anchor on the last token before `}` so trailing `;`/`,` stay with their member
        anchor = body.children[-2].end_byte
        text = separator + indent_block(member, indent)
        return (source[:anchor] + text.encode("utf8") + source[anchor:]).decode("utf8")

    text = "\n" + indent_block(member, outer + default_indent) + "\n" + outer
    return (
        source[: open_brace.end_byte] + text.encode("utf8") + source[close_brace.start_byte :]
    ).decode("utf8")
