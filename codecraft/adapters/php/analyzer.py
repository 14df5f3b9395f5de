"""
Structural report of a parsed PHP file.

Classes, interfaces, traits and top-level functions are collected at file level and
inside namespaces. Only the first namespace's name is reported.
"""

from dataclasses import asdict, dataclass, field
from tree_sitter import Node

from codecraft.adapters.php.query import (
    CLASS,
    CONST,
    FUNCTION,
    INTERFACE,
    METHOD,
    PROPERTY,
    TRAIT,
    find_all,
    members,
    modifiers,
    names_in,
    namespace_name,
    node_name,
    parameter_name,
    parameters,
    return_type,
)
from codecraft.adapters.utils import node_text
from codecraft.constants import Modifier


@dataclass
class ParamInfo:
    name: str
    type: str | None = None
    has_default: bool = False
    # Source text of the default expression
    default: str | None = None


@dataclass
class MethodInfo:
    name: str
    visibility: str = "public"
    static: bool = False
    abstract: bool = False
    final: bool = False
    return_type: str | None = None
    params: list[ParamInfo] = field(default_factory=list)


@dataclass
class SignatureInfo:
    name: str
    return_type: str | None = None
    params: list[ParamInfo] = field(default_factory=list)


@dataclass
class PropertyInfo:
    name: str
    visibility: str = "public"
    static: bool = False
    readonly: bool = False
    type: str | None = None
    default: str | None = None


@dataclass
class ConstInfo:
    name: str
    visibility: str = "public"
    value: str | None = None


@dataclass
class ClassInfo:
    name: str
    extends: str | None = None
    implements: list[str] = field(default_factory=list)
    abstract: bool = False
    final: bool = False
    methods: list[MethodInfo] = field(default_factory=list)
    properties: list[PropertyInfo] = field(default_factory=list)
    constants: list[ConstInfo] = field(default_factory=list)


@dataclass
class InterfaceInfo:
    name: str
    extends: list[str] = field(default_factory=list)
    methods: list[SignatureInfo] = field(default_factory=list)


@dataclass
class TraitInfo:
    name: str
    methods: list[MethodInfo] = field(default_factory=list)
    properties: list[PropertyInfo] = field(default_factory=list)


@dataclass
class AnalysisReport:
    namespace: str | None = None
    classes: list[ClassInfo] = field(default_factory=list)
    interfaces: list[InterfaceInfo] = field(default_factory=list)
    traits: list[TraitInfo] = field(default_factory=list)
    functions: list[SignatureInfo] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"type": "php", **asdict(self)}


def analyze_tree(root: Node) -> AnalysisReport:
    """Read-only walk of `root`; a new report is built on every call."""
    return AnalysisReport(
        namespace=namespace_name(root),
        classes=[class_info(n) for n in find_all(root, CLASS)],
        interfaces=[interface_info(n) for n in find_all(root, INTERFACE)],
        traits=[trait_info(n) for n in find_all(root, TRAIT)],
        functions=[signature_info(n) for n in find_all(root, FUNCTION)],
    )


def class_info(decl: Node) -> ClassInfo:
    flags = modifiers(decl)
    parents = names_in(decl, {"base_clause"})
    info = ClassInfo(
        name=node_name(decl),
        extends=parents[0] if parents else None,
        implements=names_in(decl, {"class_interface_clause"}),
        abstract=bool(flags & Modifier.ABSTRACT),
        final=bool(flags & Modifier.FINAL),
    )
    for member in members(decl):
        if member.type == METHOD:
            info.methods.append(method_info(member))
        elif member.type == PROPERTY:
            info.properties.extend(property_infos(member))
        elif member.type == CONST:
            info.constants.extend(const_infos(member))
    return info


def interface_info(decl: Node) -> InterfaceInfo:
    return InterfaceInfo(
        name=node_name(decl),
        extends=names_in(decl, {"base_clause", "interface_base_clause"}),
        methods=[signature_info(m) for m in members(decl) if m.type == METHOD],
    )


def trait_info(decl: Node) -> TraitInfo:
    info = TraitInfo(name=node_name(decl))
    for member in members(decl):
        if member.type == METHOD:
            info.methods.append(method_info(member))
        elif member.type == PROPERTY:
            info.properties.extend(property_infos(member))
    return info


def param_infos(node: Node) -> list[ParamInfo]:
    result = []
    for param in parameters(node):
        default = param.child_by_field_name("default_value")
        result.append(
            ParamInfo(
                name=parameter_name(param),
                type=node_text(param.child_by_field_name("type")),
                has_default=default is not None,
                default=node_text(default),
            )
        )
    return result


def method_info(node: Node) -> MethodInfo:
    flags = modifiers(node)
    return MethodInfo(
        name=node_name(node),
        visibility=flags.visibility.value,
        static=bool(flags & Modifier.STATIC),
        abstract=bool(flags & Modifier.ABSTRACT),
        final=bool(flags & Modifier.FINAL),
        return_type=return_type(node),
        params=param_infos(node),
    )


def signature_info(node: Node) -> SignatureInfo:
    return SignatureInfo(
        name=node_name(node), return_type=return_type(node), params=param_infos(node)
    )


def _declared_type(node: Node) -> str | None:
    type_node = node.child_by_field_name("type")
    if type_node is None:
        type_node = next(
            (c for c in node.named_children if c.type.endswith("_type")), None
        )
    return node_text(type_node)


def property_infos(node: Node) -> list[PropertyInfo]:
    """One entry per name declared, so `public $a, $b;` yields two properties."""
    flags = modifiers(node)
    declared_type = _declared_type(node)
    result = []
    for element in node.named_children:
        if element.type != "property_element":
            continue
        variable = element.child_by_field_name("name") or next(
            c for c in element.named_children if c.type == "variable_name"
        )
        default = element.child_by_field_name("default_value")
        if default is None:
            initializer = next(
                (c for c in element.named_children if c.type == "property_initializer"),
                None,
            )
            default = initializer.named_children[0] if initializer else None
        result.append(
            PropertyInfo(
                name=node_text(variable).lstrip("$"),
                visibility=flags.visibility.value,
                static=bool(flags & Modifier.STATIC),
                readonly=bool(flags & Modifier.READONLY),
                type=declared_type,
                default=node_text(default),
            )
        )
    return result


def const_infos(node: Node) -> list[ConstInfo]:
    visibility = modifiers(node).visibility.value
    result = []
    for element in node.named_children:
        if element.type != "const_element":
            continue
        parts = element.named_children
        name = next((c for c in parts if c.type == "name"), parts[0])
        result.append(
            ConstInfo(
                name=node_text(name),
                visibility=visibility,
                value=node_text(parts[-1]) if len(parts) > 1 else None,
            )
        )
    return result
