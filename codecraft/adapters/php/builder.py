"""
Build PHP fragments from declarative descriptors.

Descriptors are plain dicts as callers write them, e.g.

    {
        "name": "setName",
        "visibility": "public",
        "return_type": "void",
        "params": [{"name": "name", "type": "string"}],
        "body": "$this->name = $name;",
    }

A parameter (or property) record carries a default only when its `default` key is
present, so `{"name": "x", "default": None}` is an optional parameter defaulting to
`null` while `{"name": "x"}` is required.
"""

import logging
import warnings

from codecraft.adapters.base import require
from codecraft.adapters.php.nodes import (
    Block,
    ClassConst,
    ClassLike,
    ClassMethod,
    Namespace,
    Param,
    Property,
)
from codecraft.adapters.php.query import PHP_LANGUAGE, STRING_KINDS, line_start
from codecraft.adapters.utils import dedent_block, parse, syntax_error_positions, walk
from codecraft.constants import VISIBILITY_FLAGS, Modifier, Visibility
from codecraft.exceptions import SnippetParseWarning

logger = logging.getLogger(__name__)

SNIPPET_PROLOGUE = "<?php\n"
PLACEHOLDER_STATEMENT = "null;"
SKIPPED_SNIPPET_NODES = {"php_tag", "text", "text_interpolation"}

CLASS_KINDS = ("class", "interface", "trait")


def statement_literal_rows(node) -> set[int]:
    """Lines of `node`, counted from its first line, that begin inside a string literal."""
    first = node.start_point[0]
    rows = set()
    for child in walk(node):
        if child.type in STRING_KINDS:
            rows.update(range(child.start_point[0] + 1 - first, child.end_point[0] + 1 - first))
    return rows


def parse_snippet(body: str | None) -> Block:
    """
    Parse a method body snippet into a statement list.

    A snippet that does not parse does not abort the build: the body becomes a single
    `null;` statement, and the problem is reported through a SnippetParseWarning and
    on the returned Block.
    """
    if body is None or not str(body).strip():
        return Block()

    source = SNIPPET_PROLOGUE + str(body).strip("\n")
    tree = parse(PHP_LANGUAGE, source)
    root = tree.root_node
    if root.has_error:
        # Row 0 is the prologue, so rows are already 1-based body lines
        lines = sorted({row for row, _ in syntax_error_positions(root)})
        message = (
            f"Method body does not parse (syntax errors on line(s) "
            f"{', '.join(str(n) for n in lines) or '?'}); "
            f"substituted a no-op placeholder"
        )
        logger.warning(message)
        warnings.warn(message, SnippetParseWarning, stacklevel=2)
        return Block([PLACEHOLDER_STATEMENT], warning=message)

    data = source.encode("utf8")
    statements = []
    for node in root.named_children:
        if node.type in SKIPPED_SNIPPET_NODES:
            continue
        prefix = data[line_start(node) : node.start_byte].decode("utf8")
        if prefix.strip():
            # Shares its line with the previous statement
            prefix = ""
        text = prefix + data[node.start_byte : node.end_byte].decode("utf8")
        statements.append(dedent_block(text, statement_literal_rows(node)))
    return Block(statements)


def member_flags(record: dict, allowed: tuple[str, ...]) -> Modifier:
    """Visibility plus whichever boolean modifier keys in `allowed` are set."""
    flags = VISIBILITY_FLAGS[Visibility.parse(record.get("visibility"))]
    for key in allowed:
        if record.get(key):
            flags |= Modifier[key.upper()]
    return flags


def return_type_of(record: dict) -> str | None:
    return record.get("return_type") or record.get("returnType") or None


def as_names(value, what: str) -> list[str]:
    if value in (None, ""):
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ValueError(f"'{what}' must be a name or a list of names, got {value!r}")


def build_param(record: dict) -> Param:
    if not isinstance(record, dict):
        raise ValueError(f"Parameter descriptor must be a mapping, got {record!r}")
    return Param(
        name=str(require(record, "name", "parameter")).lstrip("$"),
        type=record.get("type") or None,
        has_default="default" in record,
        default=record.get("default"),
        variadic=bool(record.get("variadic")),
        by_ref=bool(record.get("by_ref")),
    )


def build_method(record: dict, signature_only: bool = False) -> ClassMethod:
    if not isinstance(record, dict):
        raise ValueError(f"Method descriptor must be a mapping, got {record!r}")
    flags = member_flags(record, ("static", "abstract", "final"))
    method = ClassMethod(
        name=str(require(record, "name", "method")),
        flags=flags,
        return_type=return_type_of(record),
        params=[build_param(p) for p in record.get("params") or []],
    )
    if signature_only or flags & Modifier.ABSTRACT:
        method.body = None
    else:
        method.body = parse_snippet(record.get("body"))
    return method


def build_property(record: dict) -> Property:
    if not isinstance(record, dict):
        raise ValueError(f"Property descriptor must be a mapping, got {record!r}")
    return Property(
        name=str(require(record, "name", "property")).lstrip("$"),
        flags=member_flags(record, ("static", "readonly")),
        type=record.get("type") or None,
        has_default="default" in record,
        default=record.get("default"),
    )


def build_constants(constants: dict | None) -> list[ClassConst]:
    if not constants:
        return []
    if not isinstance(constants, dict):
        raise ValueError("'constants' must map constant names to values")
    return [ClassConst(str(name), value) for name, value in constants.items()]


def build_class(options: dict, kind: str = "class") -> ClassLike:
    """Build a class, interface or trait declaration from create options."""
    if kind not in CLASS_KINDS:
        raise ValueError(f"Unknown declaration kind: {kind}")
    name = str(require(options, "name", kind))
    decl = ClassLike(kind=kind, name=name)
    decl.members.extend(build_constants(options.get("constants")))

    if kind == "class":
        extends = as_names(options.get("extends"), "extends")
        if len(extends) > 1:
            raise ValueError(f"Class {name} can only extend one parent, got {extends}")
        decl.extends = extends
        decl.implements = as_names(options.get("implements"), "implements")
        if options.get("abstract"):
            decl.flags |= Modifier.ABSTRACT
        if options.get("final"):
            decl.flags |= Modifier.FINAL
    elif kind == "interface":
        decl.extends = as_names(options.get("extends"), "extends")
        if options.get("properties"):
            raise ValueError(f"Interface {name} cannot declare properties")

    decl.members.extend(build_property(p) for p in options.get("properties") or [])
    decl.members.extend(
        build_method(m, signature_only=kind == "interface")
        for m in options.get("methods") or []
    )
    return decl


def build_file(options: dict, kind: str = "class") -> list[Namespace | ClassLike]:
    """Top-level nodes for a new file: the declaration, wrapped in its namespace if any."""
    decl = build_class(options, kind)
    namespace = (options.get("namespace") or "").strip("\\")
    if namespace:
        return [Namespace(namespace, [decl])]
    return [decl]
