"""
Structural queries over tree-sitter PHP trees.

Nodes have no stable identity: every lookup walks the tree it is given, and callers
re-run the lookup after each mutation instead of holding on to node references.
"""

import tree_sitter_php as tsphp

from tree_sitter import Language, Node

from codecraft.adapters.utils import node_text, parse, walk
from codecraft.constants import VISIBILITY_FLAGS, Modifier, Visibility

PHP_LANGUAGE = Language(tsphp.language_php())

CLASS = "class_declaration"
INTERFACE = "interface_declaration"
TRAIT = "trait_declaration"
FUNCTION = "function_definition"
METHOD = "method_declaration"
PROPERTY = "property_declaration"
CONST = "const_declaration"
NAMESPACE = "namespace_definition"
COMMENT = "comment"
STRING_KINDS = frozenset({"string", "encapsed_string", "heredoc", "nowdoc"})

# Wrappers a top-level search descends through: the file, namespaces (both the
# `namespace X;` and the braced form)
TOP_LEVEL = frozenset({"program", NAMESPACE, "compound_statement"})

PARAMETER_KINDS = frozenset(
    {"simple_parameter", "variadic_parameter", "property_promotion_parameter"}
)

MODIFIER_FLAGS = {
    "static_modifier": Modifier.STATIC,
    "abstract_modifier": Modifier.ABSTRACT,
    "final_modifier": Modifier.FINAL,
    "readonly_modifier": Modifier.READONLY,
    "var_modifier": Modifier.PUBLIC,
}


def find_all(
    root: Node, kinds: str | set[str] | frozenset[str], enter=TOP_LEVEL
) -> list[Node]:
    """
    Pre-order search for nodes of `kinds`, in source order.

    Only nodes whose kind is in `enter` are descended into, so a class nested inside a
    function body is never returned by a top-level search. Returns an empty list when
    nothing matches.
    """
    if isinstance(kinds, str):
        kinds = {kinds}
    found = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type in kinds:
            found.append(node)
        if node.type in enter:
            stack.extend(reversed(node.children))
    return found


def find_first(root: Node, kinds, enter=TOP_LEVEL) -> Node | None:
    matches = find_all(root, kinds, enter)
    return matches[0] if matches else None


def first_class(root: Node) -> Node | None:
    return find_first(root, CLASS)


def namespace_name(root: Node) -> str | None:
    """Name of the first namespace in the file; later namespaces are not reported."""
    namespace = find_first(root, NAMESPACE)
    if namespace is None:
        return None
    return node_text(namespace.child_by_field_name("name"))


def node_name(node: Node) -> str | None:
    return node_text(node.child_by_field_name("name"))


def class_body(decl: Node) -> Node | None:
    return decl.child_by_field_name("body")


def members(decl: Node) -> list[Node]:
    """Direct member declarations of a class-like node, comments excluded."""
    body = class_body(decl)
    if body is None:
        return []
    return [c for c in body.named_children if c.type != COMMENT]


def methods(decl: Node) -> list[Node]:
    return [m for m in members(decl) if m.type == METHOD]


def find_method(decl: Node, name: str) -> Node | None:
    for method in methods(decl):
        if node_name(method) == name:
            return method
    return None


def modifiers(node: Node) -> Modifier:
    """Collect the modifier keywords written directly on a declaration."""
    flags = Modifier.NONE
    for child in node.children:
        if child.type == "visibility_modifier":
            # Asymmetric visibility (`private(set)`) only contributes its read side
            keyword = node_text(child).split("(")[0].strip()
            flags |= VISIBILITY_FLAGS[Visibility.parse(keyword)]
        elif child.type in MODIFIER_FLAGS:
            flags |= MODIFIER_FLAGS[child.type]
    return flags


def return_type(node: Node) -> str | None:
    field = node.child_by_field_name("return_type")
    if field is not None:
        return node_text(field)
    seen_colon = False
    for child in node.children:
        if child.type == ":":
            seen_colon = True
        elif seen_colon and child.is_named:
            return node_text(child)
    return None


def parameters(node: Node) -> list[Node]:
    params = node.child_by_field_name("parameters")
    if params is None:
        return []
    return [p for p in params.named_children if p.type in PARAMETER_KINDS]


def parameter_name(param: Node) -> str:
    name = param.child_by_field_name("name")
    if name is None:
        name = next(c for c in param.named_children if c.type == "variable_name")
    return node_text(name).lstrip("&.").lstrip("$")


def names_in(decl: Node, clause_kinds: set[str]) -> list[str]:
    """Names listed in an `extends`/`implements` clause of a declaration."""
    names = []
    for child in decl.children:
        if child.type in clause_kinds:
            names.extend(
                node_text(n)
                for n in child.named_children
                if n.type in ("name", "qualified_name")
            )
    return names


def line_start(node: Node) -> int:
    """Byte offset of the start of the line `node` begins on."""
    return node.start_byte - node.start_point[1]


def literal_rows(text: str, member: bool = False) -> set[int]:
    """
    Indexes of the lines of `text` that begin inside a multi-line string literal.

    `text` is a statement list, or class members when `member` is set. Re-indenting
    those lines would change the literal's value.
    """
    prologue = "<?php\nclass _\n{\n" if member else "<?php\n"
    epilogue = "\n}\n" if member else "\n"
    tree = parse(PHP_LANGUAGE, prologue + text + epilogue)
    offset = prologue.count("\n")
    rows = set()
    for node in walk(tree.root_node):
        if node.type in STRING_KINDS:
            start, end = node.start_point[0], node.end_point[0]
            rows.update(row - offset for row in range(start + 1, end + 1))
    return rows
