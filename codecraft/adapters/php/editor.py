"""
Apply ordered edit operations to a PHP document.

A PhpDocument is the source text plus the tree parsed from it. Every operation
re-queries the current tree for its target, splices printed text into the source and
reparses, so each operation sees the result of all earlier ones. Text outside the
spliced ranges is kept byte-for-byte.
"""

import logging

from dataclasses import dataclass
from tree_sitter import Node

from codecraft.adapters.php.builder import build_method, build_property
from codecraft.adapters.php.printer import PhpPrinter
from codecraft.adapters.php.query import (
    COMMENT,
    CONST,
    METHOD,
    PHP_LANGUAGE,
    PROPERTY,
    class_body,
    find_method,
    first_class,
    line_start,
    literal_rows,
    members,
    node_name,
)
from codecraft.adapters.utils import (
    indent_block,
    leading_whitespace,
    parse,
    syntax_error_positions,
)
from codecraft.exceptions import EditError, ParseError

logger = logging.getLogger(__name__)

OPERATION_KINDS = ("add_method", "add_property", "replace_method")


class PhpDocument:
    def __init__(self, source: str | bytes):
        self.source = source.encode("utf8") if isinstance(source, str) else source
        self.tree = parse(PHP_LANGUAGE, self.source)

    @classmethod
    def parse(cls, source: str | bytes) -> "PhpDocument":
        """Parse `source`, refusing anything with syntax errors."""
        document = cls(source)
        if document.root.has_error:
            raise ParseError(
                "Could not parse PHP source", syntax_error_positions(document.root)
            )
        return document

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def text(self) -> str:
        return self.source.decode("utf8")

    def slice(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf8")

    def splice(self, start: int, end: int, text: str):
        """
        Replace bytes [start, end) with `text` and reparse.

        The document is left untouched if the result does not parse.
        """
        source = self.source[:start] + text.encode("utf8") + self.source[end:]
        tree = parse(PHP_LANGUAGE, source)
        if tree.root_node.has_error:
            rows = [row + 1 for row, _ in syntax_error_positions(tree.root_node)]
            raise EditError(f"Edit produced invalid PHP (syntax errors on lines {rows})")
        self.source, self.tree = source, tree


@dataclass
class EditOperation:
    type: str
    method: dict | None = None
    property: dict | None = None
    method_name: str | None = None

    @classmethod
    def from_dict(cls, record: dict) -> "EditOperation":
        if not isinstance(record, dict):
            raise ValueError(f"Modification must be a mapping, got {record!r}")
        kind = record.get("type")
        if kind not in OPERATION_KINDS:
            raise ValueError(
                f"Unknown modification type: {kind}. Must be one of {list(OPERATION_KINDS)}"
            )
        descriptor_key = "property" if kind == "add_property" else "method"
        if not isinstance(record.get(descriptor_key), dict):
            raise ValueError(f"{kind} requires a '{descriptor_key}' mapping")
        if kind == "replace_method" and not record.get("method_name"):
            raise ValueError("replace_method requires 'method_name'")
        return cls(
            type=kind,
            method=record.get("method"),
            property=record.get("property"),
            method_name=record.get("method_name"),
        )


class EditDispatcher:
    """Applies add_method / add_property / replace_method to the first class of a file."""

    def __init__(self, printer: PhpPrinter | None = None):
        self.printer = printer or PhpPrinter()
        self.handlers = {
            "add_method": self.add_method,
            "add_property": self.add_property,
            "replace_method": self.replace_method,
        }

    def apply(
        self, document: PhpDocument, operations: list[dict | EditOperation]
    ) -> PhpDocument:
        # Reject malformed operations before touching the document
        operations = [
            op if isinstance(op, EditOperation) else EditOperation.from_dict(op)
            for op in operations
        ]
        for op in operations:
            decl = first_class(document.root)
            if decl is None:
                raise EditError(f"No class to modify ({op.type})")
            logger.debug(f"{op.type} on class {node_name(decl)}")
            self.handlers[op.type](document, decl, op)
        return document

    def add_method(self, document: PhpDocument, decl: Node, op: EditOperation):
        text = self.printer.method(build_method(op.method))
        self._append_member(document, decl, text, separator="\n\n")

    def add_property(self, document: PhpDocument, decl: Node, op: EditOperation):
        text = self.printer.property(build_property(op.property))
        body = class_body(decl)
        children = body.named_children
        index = next((i for i, c in enumerate(children) if c.type == METHOD), None)
        if index is None:
            existing = members(decl)
            only_fields = all(m.type in (PROPERTY, CONST) for m in existing)
            self._append_member(
                document, decl, text, separator="\n" if only_fields else "\n\n"
            )
            return

        # Keep the first method's docblock attached to it
        while index > 0 and children[index - 1].type == COMMENT:
            comment = children[index - 1]
            if document.slice(line_start(comment), comment.start_byte).strip():
                break
            index -= 1
        anchor = children[index]
        indent = self._member_indent(document, decl)
        block = self._indent_member(text, indent)
        prefix = document.slice(line_start(anchor), anchor.start_byte)
        if prefix.strip():
            # The method shares its line with the class header or another member
            start = line_start(anchor) + len(prefix.rstrip().encode("utf8"))
            document.splice(start, anchor.start_byte, "\n" + block + "\n\n" + indent)
            return
        document.splice(line_start(anchor), line_start(anchor), block + "\n\n")

    def replace_method(self, document: PhpDocument, decl: Node, op: EditOperation):
        target = find_method(decl, op.method_name)
        if target is None:
            raise EditError(
                f"Method '{op.method_name}' not found in class {node_name(decl)}"
            )
        record = dict(op.method)
        record["name"] = record.get("name") or op.method_name
        text = self.printer.method(build_method(record))

        prefix = document.slice(line_start(target), target.start_byte)
        indent = self._member_indent(document, decl) if prefix.strip() else prefix
        # The first line lands where the old declaration started, already indented
        block = self._indent_member(text, indent)[len(indent) :]
        document.splice(target.start_byte, target.end_byte, block)

    ### Helpers ###

    def _class_indent(self, document: PhpDocument, decl: Node) -> str:
        return leading_whitespace(document.slice(line_start(decl), decl.start_byte))

    def _member_indent(self, document: PhpDocument, decl: Node) -> str:
        existing = members(decl)
        if existing:
            prefix = document.slice(line_start(existing[0]), existing[0].start_byte)
            if prefix and not prefix.strip():
                return prefix
        return self._class_indent(document, decl) + self.printer.indent

    def _indent_member(self, text: str, indent: str) -> str:
        return indent_block(text, indent, literal_rows(text, member=True))

    def _append_member(
        self, document: PhpDocument, decl: Node, text: str, separator: str
    ):
        block = self._indent_member(text, self._member_indent(document, decl))
        body = class_body(decl)
        if body.named_children:
            last = body.named_children[-1]
            document.splice(last.end_byte, last.end_byte, separator + block)
            return

        # Empty body: rewrite everything between the braces
        open_brace, close_brace = body.children[0], body.children[-1]
        document.splice(
            open_brace.end_byte,
            close_brace.start_byte,
            "\n" + block + "\n" + self._class_indent(document, decl),
        )
