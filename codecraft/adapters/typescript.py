import re

import tree_sitter_typescript as tsts

from pathlib import Path
from tree_sitter import Language, Node, Tree

from codecraft.adapters.base import FileAdapter, require
from codecraft.adapters.utils import (
    append_to_body,
    body_lines,
    ext_of,
    indent_block,
    line_prefix,
    node_text,
    parse,
    read_source,
    walk,
)
from codecraft.exceptions import EditError

TS_LANGUAGE = Language(tsts.language_typescript())
TSX_LANGUAGE = Language(tsts.language_tsx())

TS_INDENT = "  "
CLASS_NODES = {"class_declaration", "abstract_class_declaration"}
FUNCTION_VALUES = {"arrow_function", "function_expression", "function"}

HTTP_VERBS_WITH_BODY = {"POST", "PUT", "PATCH"}


### Fragment generators ###


def generics(params) -> str:
    return "<" + ", ".join(params) + ">" if params else ""


def ts_import(record: dict | str) -> str:
    if isinstance(record, str):
        return f"import '{record}';"
    source = require(record, "from", "import")
    if record.get("default"):
        return f"import {record['default']} from '{source}';"
    if record.get("namespace"):
        return f"import * as {record['namespace']} from '{source}';"
    if record.get("named"):
        named = record["named"]
        named = ", ".join(named) if isinstance(named, (list, tuple)) else named
        return f"import {{ {named} }} from '{source}';"
    return f"import '{source}';"


def imports_block(options: dict) -> str:
    imports = [ts_import(i) for i in options.get("imports") or []]
    return "\n".join(imports) + "\n\n" if imports else ""


def ts_param(param: dict | str) -> str:
    if isinstance(param, str):
        return param
    optional = "?" if param.get("optional") else ""
    default = f" = {param['default']}" if param.get("default") is not None else ""
    name = require(param, "name", "parameter")
    return f"{name}{optional}: {param.get('type') or 'any'}{default}"


def ts_params(params) -> str:
    return ", ".join(ts_param(p) for p in params or [])


def ts_property(prop: dict) -> str:
    visibility = prop.get("visibility") or "private"
    static = "static " if prop.get("static") else ""
    readonly = "readonly " if prop.get("readonly") else ""
    optional = "?" if prop.get("optional") else ""
    default = f" = {prop['default']}" if prop.get("default") is not None else ""
    name = require(prop, "name", "property")
    return f"{visibility} {static}{readonly}{name}{optional}: {prop.get('type') or 'any'}{default};"


def ts_block(head: str, body: str | None) -> str:
    if not body:
        return head + " {\n}"
    return head + " {\n" + body_lines(body, TS_INDENT) + "\n}"


def ts_method(method: dict) -> str:
    visibility = method.get("visibility") or "public"
    static = "static " if method.get("static") else ""
    async_kw = "async " if method.get("async") else ""
    abstract = "abstract " if method.get("abstract") else ""
    name = require(method, "name", "method")
    return_type = method.get("return_type") or method.get("returnType") or "void"
    decorators = "".join(f"@{d}\n" for d in method.get("decorators") or [])
    head = (
        f"{decorators}{visibility} {abstract}{static}{async_kw}{name}"
        f"({ts_params(method.get('params'))}): {return_type}"
    )
    if method.get("abstract"):
        return head + ";"
    return ts_block(head, method.get("body"))


def ts_constructor(constructor: dict) -> str:
    params = []
    for param in constructor.get("params") or []:
        if isinstance(param, dict):
            visibility = f"{param['visibility']} " if param.get("visibility") else ""
            readonly = "readonly " if param.get("readonly") else ""
            params.append(visibility + readonly + ts_param(param))
        else:
            params.append(param)
    visibility = constructor.get("visibility")
    head = (f"{visibility} " if visibility else "") + f"constructor({', '.join(params)})"
    return ts_block(head, constructor.get("body"))


def ts_function(func: dict) -> str:
    async_kw = "async " if func.get("async") else ""
    name = require(func, "name", "function")
    return_type = func.get("return_type") or func.get("returnType") or "void"
    export = "export " if func.get("export", True) else ""
    head = (
        f"{export}{async_kw}function {name}{generics(func.get('generic'))}"
        f"({ts_params(func.get('params'))}): {return_type}"
    )
    return ts_block(head, func.get("body"))


def mapped_type(options: dict) -> str:
    key = options.get("key_type") or "K"
    value = options.get("value_type") or f"T[{key}]"
    source = options.get("source_type") or "T"
    modifier = options.get("modifier")
    prefix = {"readonly": "readonly ", "remove_readonly": "-readonly "}.get(modifier, "")
    suffix = {"optional": "?", "remove_optional": "-?"}.get(modifier, "")
    remap = f" as {options['key_remapping']}" if options.get("key_remapping") else ""
    return f"{{\n  {prefix}[{key} in keyof {source}]{remap}{suffix}: {value};\n}}"


def conditional_type(options: dict) -> str:
    check = require(options, "check_type", "conditional type")
    extends = require(options, "extends_type", "conditional type")
    inference = options.get("inference")
    if inference:
        extends = extends.replace(inference["placeholder"], f"infer {inference['name']}")
    true_type = require(options, "true_type", "conditional type")
    false_type = require(options, "false_type", "conditional type")
    return f"{check} extends {extends} ? {true_type} : {false_type}"


def utility_type(options: dict) -> str:
    utility = require(options, "utility_type", "utility type")
    source = require(options, "source_type", "utility type")
    if utility in ("Pick", "Omit"):
        keys = options.get("keys")
        if isinstance(keys, (list, tuple)):
            keys = " | ".join(f"'{k}'" for k in keys)
        return f"{utility}<{source}, {keys}>"
    if utility == "Record":
        return f"Record<{source}, {options.get('value_type') or 'any'}>"
    if utility in ("Exclude", "Extract"):
        return f"{utility}<{source}, {require(options, 'exclude_type', utility)}>"
    return f"{utility}<{source}>"


def template_literal_type(options: dict) -> str:
    template = require(options, "template", "template literal type")
    for placeholder, type_ in (options.get("placeholders") or {}).items():
        template = template.replace(f"{{{placeholder}}}", f"${{{type_}}}")
    return f"`{template}`"


TYPE_CATEGORIES = {
    "basic": lambda options: require(options, "type_definition", "basic type"),
    "mapped": mapped_type,
    "conditional": conditional_type,
    "utility": utility_type,
    "template_literal": template_literal_type,
}


def api_method_name(verb: str, path: str) -> str:
    words = [w for w in re.split(r"[/:\-_]+", path) if w]
    return verb.lower() + "".join(w[:1].upper() + w[1:] for w in words)


### Tree helpers ###


def find_ts_class(root: Node, name: str) -> Node | None:
    for node in walk(root):
        if node.type in CLASS_NODES and node_text(node.child_by_field_name("name")) == name:
            return node
    return None


def unwrap(node: Node | None) -> str | None:
    """Inner text of a `<...>` or `(...)` list node."""
    text = node_text(node)
    if text and text[0] in "<(" and text[-1] in ">)":
        return text[1:-1].strip()
    return text


def annotation(node: Node | None) -> str | None:
    """Type text of a `: T` annotation node."""
    text = node_text(node)
    return text.lstrip(":").strip() if text is not None else None


class TypeScriptAdapter(FileAdapter):
    name = "typescript"
    exts = ["ts", "tsx"]
    default_type = "module"
    capabilities = {
        "create_class": True,
        "create_interface": True,
        "create_type": True,
        "create_component": True,
        "create_service": True,
        "create_hook": True,
        "create_api_client": True,
        "create_store": True,
        "add_import": True,
        "add_interface": True,
        "add_method": True,
        "add_property": True,
        "add_type": True,
        "supports_generics": True,
        "supports_decorators": True,
        "supports_jsx": True,
        "supports_async": True,
    }

    def creators(self):
        return {
            "module": self.create_module,
            "class": self.create_class,
            "interface": self.create_interface,
            "type": self.create_type,
            "component": self.create_component,
            "service": self.create_service,
            "hook": self.create_hook,
            "utility": self.create_utility,
            "api": self.create_api,
            "store": self.create_store,
        }

    def modifiers(self):
        return {
            "add_import": self.add_import,
            "add_interface": self.add_interface,
            "add_method": self.add_method,
            "add_property": self.add_property,
            "add_type": self.add_type,
        }

    ### Generation ###

    def create_class(self, file_path: Path, options: dict) -> str:
        name = require(options, "name", "class")
        code = imports_block(options)
        code += "".join(f"@{d}\n" for d in options.get("decorators") or [])
        abstract = "abstract " if options.get("abstract") else ""
        code += f"export {abstract}class {name}{generics(options.get('generic_params'))}"
        if options.get("extends"):
            code += f" extends {options['extends']}"
        if options.get("implements"):
            code += " implements " + ", ".join(options["implements"])

        sections = []
        properties = [ts_property(p) for p in options.get("properties") or []]
        if properties:
            sections.append("\n".join(properties))
        if options.get("constructor"):
            sections.append(ts_constructor(options["constructor"]))
        sections.extend(ts_method(m) for m in options.get("methods") or [])
        return code + self._class_body(sections)

    def create_interface(self, file_path: Path, options: dict) -> str:
        name = require(options, "name", "interface")
        code = imports_block(options)
        code += f"export interface {name}{generics(options.get('generic_params'))}"
        if options.get("extends"):
            code += " extends " + ", ".join(options["extends"])
        lines = []
        for prop in options.get("properties") or []:
            readonly = "readonly " if prop.get("readonly") else ""
            optional = "?" if prop.get("optional") else ""
            lines.append(f"{TS_INDENT}{readonly}{prop['name']}{optional}: {prop.get('type') or 'any'};")
        return code + " {\n" + "".join(line + "\n" for line in lines) + "}\n"

    def create_type(self, file_path: Path, options: dict) -> str:
        name = require(options, "name", "type")
        category = options.get("type_category") or "basic"
        if category not in TYPE_CATEGORIES:
            raise ValueError(
                f"Unknown type category: {category}. Must be one of {list(TYPE_CATEGORIES)}"
            )
        definition = TYPE_CATEGORIES[category](options)
        code = imports_block(options)
        return code + f"export type {name}{generics(options.get('generic_params'))} = {definition};\n"

    def create_component(self, file_path: Path, options: dict) -> str:
        name = require(options, "name", "component")
        props = options.get("props") or []
        hooks = options.get("hooks") or []
        props_interface = options.get("props_interface") or f"{name}Props"

        named = ", { " + ", ".join(hooks) + " }" if hooks else ""
        code = f"import React{named} from 'react';\n\n" + imports_block(options)
        if props:
            code += f"interface {props_interface} {{\n"
            for prop in props:
                optional = "?" if prop.get("optional") else ""
                code += f"{TS_INDENT}{prop['name']}{optional}: {prop.get('type') or 'any'};\n"
            code += "}\n\n"
            params = "{ " + ", ".join(p["name"] for p in props) + f" }}: {props_interface}"
            component_type = f"React.FC<{props_interface}>"
        else:
            params = ""
            component_type = "React.FC"

        code += f"const {name}: {component_type} = ({params}) => {{\n"
        if "useState" in hooks:
            code += "  const [state, setState] = useState();\n"
        if "useEffect" in hooks:
            code += "  useEffect(() => {\n    // Effect logic here\n  }, []);\n"
        if hooks:
            code += "\n"
        code += (
            "  return (\n"
            f'    <div className="{name}">\n'
            f"      <h1>{name}</h1>\n"
            "    </div>\n"
            "  );\n"
            "};\n\n"
            f"export default {name};\n"
        )
        return code

    def create_service(self, file_path: Path, options: dict) -> str:
        name = require(options, "name", "service")
        dependencies = options.get("dependencies") or []
        singleton = options.get("singleton", False)
        code = imports_block(options) + f"export class {name}"

        sections = []
        fields = []
        if singleton:
            fields.append(f"private static instance: {name};")
        fields.extend(f"private {d['name']}: {d['type']};" for d in dependencies)
        if fields:
            sections.append("\n".join(fields))
        if dependencies or singleton:
            sections.append(
                ts_constructor(
                    {
                        "visibility": "private" if singleton else "public",
                        "params": [f"{d['name']}: {d['type']}" for d in dependencies],
                        "body": "\n".join(f"this.{d['name']} = {d['name']};" for d in dependencies),
                    }
                )
            )
        if singleton:
            sections.append(
                ts_block(
                    f"public static getInstance(): {name}",
                    f"if (!{name}.instance) {{\n"
                    f"  {name}.instance = new {name}();\n"
                    f"}}\n"
                    f"return {name}.instance;",
                )
            )
        sections.extend(ts_method(m) for m in options.get("methods") or [])
        return code + self._class_body(sections)

    def create_hook(self, file_path: Path, options: dict) -> str:
        name = require(options, "name", "hook")
        return_type = options.get("return_type") or "any"
        react_imports = ["useState", "useEffect"]
        for dep in options.get("dependencies") or []:
            if dep not in react_imports:
                react_imports.append(dep)
        code = "import { " + ", ".join(react_imports) + " } from 'react';\n\n"
        code += imports_block(options)
        code += f"export const {name} = ({ts_params(options.get('params'))}): {return_type} => {{\n"
        code += (
            "  const [state, setState] = useState();\n\n"
            "  useEffect(() => {\n"
            "    // Hook logic here\n"
            "  }, []);\n\n"
            "  return {\n"
            "    // Return hook interface\n"
            "  };\n"
            "};\n"
        )
        return code

    def create_utility(self, file_path: Path, options: dict) -> str:
        sections = []
        if options.get("imports"):
            sections.append(imports_block(options).rstrip("\n"))
        types = [self.create_type(file_path, t).rstrip("\n") for t in options.get("types") or []]
        if types:
            sections.append("\n".join(types))
        constants = [
            f"export const {c['name']}: {c.get('type') or 'any'} = {c['value']};"
            for c in options.get("constants") or []
        ]
        if constants:
            sections.append("\n".join(constants))
        sections.extend(ts_function(f) for f in options.get("functions") or [])
        return "\n\n".join(sections) + "\n"

    def create_api(self, file_path: Path, options: dict) -> str:
        name = require(options, "name", "api client")
        base_url = options.get("base_url") or options.get("baseUrl") or "process.env.REACT_APP_API_URL"
        code = "import axios, { AxiosInstance, AxiosResponse } from 'axios';\n\n"
        code += imports_block(options) + f"export class {name}"

        sections = [
            "private api: AxiosInstance;",
            ts_block(
                f"constructor(baseURL: string = {base_url})",
                "this.api = axios.create({\n"
                "  baseURL,\n"
                "  headers: {\n"
                "    'Content-Type': 'application/json',\n"
                "  },\n"
                "});",
            ),
        ]
        for endpoint in options.get("endpoints") or []:
            path = require(endpoint, "path", "endpoint")
            for verb in endpoint.get("methods") or ["GET"]:
                verb = verb.upper()
                params = "data: any" if verb in HTTP_VERBS_WITH_BODY else ""
                args = f"'{path}', data" if params else f"'{path}'"
                sections.append(
                    ts_block(
                        f"async {api_method_name(verb, path)}<T = any>({params}): Promise<AxiosResponse<T>>",
                        f"return this.api.{verb.lower()}({args});",
                    )
                )
        return code + self._class_body(sections)

    def create_store(self, file_path: Path, options: dict) -> str:
        name = require(options, "name", "store")
        store_type = options.get("store_type") or "zustand"
        if store_type != "zustand":
            raise ValueError(f"Unknown store type: {store_type}. Must be one of ['zustand']")
        state = options.get("state") or []
        actions = options.get("actions") or []

        code = "import { create } from 'zustand';\n\n"
        code += f"interface {name}State {{\n"
        code += "".join(f"{TS_INDENT}{s['name']}: {s['type']};\n" for s in state)
        code += "".join(f"{TS_INDENT}{a['name']}: {a['signature']};\n" for a in actions)
        code += "}\n\n"
        code += f"export const use{name} = create<{name}State>((set, get) => ({{\n"
        code += "".join(f"{TS_INDENT}{s['name']}: {s.get('default', 'null')},\n" for s in state)
        code += "".join(f"{TS_INDENT}{a['name']}: {a['implementation']},\n" for a in actions)
        return code + "}));\n"

    def create_module(self, file_path: Path, options: dict) -> str:
        sections = []
        if options.get("imports"):
            sections.append(imports_block(options).rstrip("\n"))
        sections.extend(self.create_type(file_path, t).rstrip("\n") for t in options.get("types") or [])
        sections.extend(
            self.create_interface(file_path, i).rstrip("\n") for i in options.get("interfaces") or []
        )
        sections.extend(ts_function(f) for f in options.get("functions") or [])
        sections.extend(self.create_class(file_path, c).rstrip("\n") for c in options.get("classes") or [])
        if options.get("exports"):
            sections.append("export { " + ", ".join(options["exports"]) + " };")
        return "\n\n".join(sections) + "\n" if sections else ""

    def _class_body(self, sections: list[str]) -> str:
        if not sections:
            return " {\n}\n"
        return " {\n" + "\n\n".join(indent_block(s, TS_INDENT) for s in sections) + "\n}\n"

    ### Modification ###

    def add_import(self, content: str, modification: dict) -> str:
        statement = ts_import(require(modification, "import", "add_import"))
        lines = content.split("\n")
        insert_at = 0
        for index, line in enumerate(lines):
            if re.match(r"import\s", line.strip()):
                insert_at = index + 1
            elif line.strip():
                break
        lines.insert(insert_at, statement)
        return "\n".join(lines)

    def add_interface(self, content: str, modification: dict) -> str:
        interface = require(modification, "interface", "add_interface")
        return content.rstrip("\n") + "\n\n" + self.create_interface(Path(), interface)

    def add_type(self, content: str, modification: dict) -> str:
        type_def = require(modification, "type_def", "add_type")
        return content.rstrip("\n") + "\n\n" + self.create_type(Path(), type_def)

    def add_method(self, content: str, modification: dict) -> str:
        method = require(modification, "method", "add_method")
        body = self._class_body_node(content, modification)
        return append_to_body(content, body, ts_method(method), TS_INDENT)

    def add_property(self, content: str, modification: dict) -> str:
        prop = ts_property(require(modification, "property", "add_property"))
        body = self._class_body_node(content, modification)
        members = body.named_children
        if not members:
            return append_to_body(content, body, prop, TS_INDENT)
        # Properties go ahead of existing members
        source = content.encode("utf8")
        first = members[0]
        indent = line_prefix(source, first)
        if indent.strip():
            indent = TS_INDENT
        at = first.start_byte - first.start_point[1]
        text = indent_block(prop, indent) + "\n"
        return (source[:at] + text.encode("utf8") + source[at:]).decode("utf8")

    def _class_body_node(self, content: str, modification: dict) -> Node:
        class_name = modification.get("class_name") or require(modification, "class", modification["type"])
        decl = find_ts_class(self._parse(content).root_node, class_name)
        if decl is None:
            raise EditError(f"Class '{class_name}' not found")
        return decl.child_by_field_name("body")

    ### Analysis ###

    def _parse(self, content: str, tsx: bool = False) -> Tree:
        """Parse with the TS grammar, falling back to TSX when only that one accepts it."""
        first, second = (TSX_LANGUAGE, TS_LANGUAGE) if tsx else (TS_LANGUAGE, TSX_LANGUAGE)
        tree = parse(first, content)
        if tree.root_node.has_error:
            other = parse(second, content)
            if not other.root_node.has_error:
                return other
        return tree

    def analyze(self, file_path: str | Path) -> dict:
        return self.analyze_source(read_source(file_path), tsx=ext_of(file_path) == "tsx")

    def analyze_source(self, content: str, tsx: bool = False) -> dict:
        root = self._parse(content, tsx).root_node
        report = {
            "type": "typescript",
            "imports": [],
            "exports": [],
            "interfaces": [],
            "types": [],
            "classes": [],
            "functions": [],
            "components": [],
            "enums": [],
        }
        for node in walk(root):
            if node.type == "import_statement":
                clause = next((c for c in node.named_children if c.type == "import_clause"), None)
                source = node_text(node.child_by_field_name("source")).strip("'\"`")
                report["imports"].append({"what": node_text(clause), "from": source})
            elif node.type == "export_statement":
                report["exports"].extend(self._export_names(node))
            elif node.type == "interface_declaration":
                report["interfaces"].append(self._interface_info(node))
            elif node.type == "type_alias_declaration":
                report["types"].append(
                    {
                        "name": node_text(node.child_by_field_name("name")),
                        "generics": unwrap(node.child_by_field_name("type_parameters")),
                        "definition": node_text(node.child_by_field_name("value")),
                    }
                )
            elif node.type in CLASS_NODES:
                report["classes"].append(self._class_info(node))
            elif node.type == "function_declaration":
                report["functions"].append(self._function_info(node, node, "function"))
            elif node.type == "variable_declarator":
                value = node.child_by_field_name("value")
                if value is None or value.type not in FUNCTION_VALUES:
                    continue
                declared = annotation(node.child_by_field_name("type"))
                if declared and re.match(r"(React\.)?FC\b", declared):
                    props = re.search(r"<(.+)>", declared)
                    report["components"].append(
                        {
                            "name": node_text(node.child_by_field_name("name")),
                            "type": "functional",
                            "props_type": props.group(1) if props else None,
                        }
                    )
                report["functions"].append(self._function_info(node, value, "arrow"))
            elif node.type == "enum_declaration":
                body = node.child_by_field_name("body")
                members = []
                for member in body.named_children if body else []:
                    name = member.child_by_field_name("name") or member
                    members.append(node_text(name))
                report["enums"].append(
                    {"name": node_text(node.child_by_field_name("name")), "members": members}
                )
        return report

    def _export_names(self, node: Node) -> list[str]:
        if any(c.type == "default" for c in node.children):
            return ["default"]
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            name = declaration.child_by_field_name("name")
            if name is not None:
                return [node_text(name)]
            return [
                node_text(d.child_by_field_name("name"))
                for d in declaration.named_children
                if d.type == "variable_declarator"
            ]
        return [
            node_text(s.child_by_field_name("alias") or s.child_by_field_name("name"))
            for s in walk(node)
            if s.type == "export_specifier"
        ]

    def _interface_info(self, node: Node) -> dict:
        extends = []
        for clause in node.named_children:
            if clause.type == "extends_type_clause":
                extends.extend(node_text(t) for t in clause.named_children)
        body = node.child_by_field_name("body")
        properties = [
            node_text(m.child_by_field_name("name"))
            for m in (body.named_children if body else [])
            if m.type in ("property_signature", "method_signature")
        ]
        return {
            "name": node_text(node.child_by_field_name("name")),
            "generics": unwrap(node.child_by_field_name("type_parameters")),
            "extends": extends,
            "members": properties,
        }

    def _class_info(self, node: Node) -> dict:
        extends, implements = None, []
        for heritage in node.named_children:
            if heritage.type != "class_heritage":
                continue
            for clause in heritage.named_children:
                if clause.type == "extends_clause" and clause.named_children:
                    extends = node_text(clause.named_children[0])
                elif clause.type == "implements_clause":
                    implements.extend(node_text(t) for t in clause.named_children)
        body = node.child_by_field_name("body")
        methods, properties = [], []
        for member in body.named_children:
            name = node_text(member.child_by_field_name("name"))
            if member.type in ("method_definition", "abstract_method_signature"):
                methods.append(name)
            elif member.type in ("public_field_definition", "field_definition"):
                properties.append(name)
        return {
            "name": node_text(node.child_by_field_name("name")),
            "generics": unwrap(node.child_by_field_name("type_parameters")),
            "abstract": node.type == "abstract_class_declaration",
            "extends": extends,
            "implements": implements,
            "methods": methods,
            "properties": properties,
        }

    def _function_info(self, named: Node, function: Node, kind: str) -> dict:
        params = function.child_by_field_name("parameters")
        if params is None:
            params = function.child_by_field_name("parameter")
        return {
            "name": node_text(named.child_by_field_name("name")),
            "type": kind,
            "async": any(c.type == "async" for c in function.children),
            "generics": unwrap(function.child_by_field_name("type_parameters")),
            "params": unwrap(params) or "",
            "return_type": annotation(function.child_by_field_name("return_type")),
        }

    def validate(self, content: str) -> bool:
        return not self._parse(content).root_node.has_error

    def get_help(self) -> dict:
        return {
            "description": "TypeScript adapter for classes, interfaces, types, React components and services",
            "types": list(self.creators()),
            "modifications": list(self.modifiers()),
            "type_categories": list(TYPE_CATEGORIES),
            "options": {
                "name": "Name of the entity",
                "imports": "List of {from, default|namespace|named}",
                "generic_params": "Generic type parameters",
                "abstract": "Make the class abstract",
                "decorators": "Class decorators",
                "properties": "List of {name, type, visibility, static, readonly, optional, default}",
                "methods": "List of {name, params, return_type, body, async, static, abstract}",
                "type_category": "basic, mapped, conditional, utility, template_literal",
                "props": "Component props as {name, type, optional}",
                "dependencies": "Service dependencies as {name, type}",
                "singleton": "Use the singleton pattern for services",
                "endpoints": "API client endpoints as {path, methods}",
            },
            "examples": [
                {
                    "path": "User.ts",
                    "options": {
                        "type": "interface",
                        "name": "User",
                        "properties": [
                            {"name": "id", "type": "number"},
                            {"name": "avatar", "type": "string", "optional": True},
                        ],
                        "extends": ["BaseEntity"],
                    },
                },
                {
                    "path": "UserUpdate.ts",
                    "options": {
                        "type": "type",
                        "name": "UserUpdate",
                        "type_category": "utility",
                        "utility_type": "Partial",
                        "source_type": "User",
                    },
                },
            ],
        }
