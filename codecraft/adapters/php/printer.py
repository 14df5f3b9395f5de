"""
Render synthesized PHP fragments as PSR-12 formatted source text.
"""

import math

from typing import Any

from codecraft.adapters.php.nodes import (
    Block,
    ClassConst,
    ClassLike,
    ClassMethod,
    Namespace,
    Param,
    Property,
)
from codecraft.adapters.php.query import literal_rows
from codecraft.adapters.utils import indent_block
from codecraft.constants import (
    DEFAULT_INDENT,
    MODIFIER_KEYWORDS,
    PHP_OPEN_TAG,
    PHP_STRICT_TYPES,
    Modifier,
)


DOUBLE_QUOTE_ESCAPES = {"\\": "\\\\", '"': '\\"', "$": "\\$", "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _quote(value: str) -> str:
    # Control characters only survive re-indentation as escape sequences
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in value):
        escaped = "".join(
            DOUBLE_QUOTE_ESCAPES.get(c)
            or (f"\\x{ord(c):02x}" if ord(c) < 0x20 or ord(c) == 0x7F else c)
            for c in value
        )
        return '"' + escaped + '"'
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _number(value: int | float) -> str:
    if isinstance(value, float) and math.isnan(value):
        return "NAN"
    if isinstance(value, float) and math.isinf(value):
        return "INF" if value > 0 else "-INF"
    return repr(value)


class PhpPrinter:
    def __init__(self, indent: str = DEFAULT_INDENT):
        self.indent = indent

    def value(self, value: Any) -> str:
        """Render a Python value as a PHP literal expression."""
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return _number(value)
        if isinstance(value, str):
            return _quote(value)
        if isinstance(value, (list, tuple)):
            return "[" + ", ".join(self.value(v) for v in value) + "]"
        if isinstance(value, dict):
            if list(value.keys()) == list(range(len(value))):
                return self.value(list(value.values()))
            items = [f"{self.value(k)} => {self.value(v)}" for k, v in value.items()]
            return "[" + ", ".join(items) + "]"
        raise ValueError(f"Cannot render {type(value).__name__} as a PHP literal")

    def modifiers(self, flags: Modifier) -> str:
        return "".join(f"{kw} " for flag, kw in MODIFIER_KEYWORDS if flags & flag)

    def param(self, param: Param) -> str:
        code = f"{param.type} " if param.type else ""
        if param.by_ref:
            code += "&"
        if param.variadic:
            code += "..."
        code += f"${param.name}"
        if param.has_default:
            code += f" = {self.value(param.default)}"
        return code

    def block(self, block: Block) -> str:
        if not block.statements:
            return "{\n}"
        inner = "\n".join(
            indent_block(s, self.indent, literal_rows(s)) for s in block.statements
        )
        return "{\n" + inner + "\n}"

    def method(self, method: ClassMethod) -> str:
        params = ", ".join(self.param(p) for p in method.params)
        code = f"{self.modifiers(method.flags)}function {method.name}({params})"
        if method.return_type:
            code += f": {method.return_type}"
        if method.body is None:
            return code + ";"
        return code + "\n" + self.block(method.body)

    def property(self, prop: Property) -> str:
        code = self.modifiers(prop.flags)
        if prop.type:
            code += f"{prop.type} "
        code += f"${prop.name}"
        if prop.has_default:
            code += f" = {self.value(prop.default)}"
        return code + ";"

    def const(self, const: ClassConst) -> str:
        return f"{self.modifiers(const.flags)}const {const.name} = {self.value(const.value)};"

    def member(self, member: ClassConst | Property | ClassMethod) -> str:
        if isinstance(member, ClassMethod):
            return self.method(member)
        if isinstance(member, Property):
            return self.property(member)
        return self.const(member)

    def class_like(self, decl: ClassLike) -> str:
        code = f"{self.modifiers(decl.flags)}{decl.kind} {decl.name}"
        if decl.extends:
            code += " extends " + ", ".join(decl.extends)
        if decl.implements:
            code += " implements " + ", ".join(decl.implements)
        if not decl.members:
            return code + "\n{\n}"

        body = []
        previous = None
        for member in decl.members:
            # Consecutive constants/properties stay together; methods get a blank line
            if previous is not None and (
                isinstance(member, ClassMethod) or isinstance(previous, ClassMethod)
            ):
                body.append("")
            text = self.member(member)
            body.append(indent_block(text, self.indent, literal_rows(text, member=True)))
            previous = member
        return code + "\n{\n" + "\n".join(body) + "\n}"

    def namespace(self, ns: Namespace) -> str:
        parts = [f"namespace {ns.name};"] + [self.node(s) for s in ns.statements]
        return "\n\n".join(parts)

    def node(self, node: Namespace | ClassLike) -> str:
        if isinstance(node, Namespace):
            return self.namespace(node)
        return self.class_like(node)

    def file(self, nodes: list[Namespace | ClassLike], strict_types: bool = True) -> str:
        parts = [PHP_OPEN_TAG]
        if strict_types:
            parts.append(PHP_STRICT_TYPES)
        parts.extend(self.node(n) for n in nodes)
        return "\n\n".join(parts) + "\n"
