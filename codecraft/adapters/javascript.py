import re

import tree_sitter_javascript as tsjs

from pathlib import Path
from tree_sitter import Language, Node

from codecraft.adapters.base import FileAdapter, require
from codecraft.adapters.utils import (
    append_to_body,
    body_lines,
    is_valid_tree,
    node_text,
    parse,
    walk,
)
from codecraft.constants import TODO_IMPLEMENT
from codecraft.exceptions import EditError

JS_LANGUAGE = Language(tsjs.language())

JS_INDENT = "  "
FUNCTION_VALUES = {"arrow_function", "function_expression", "function"}
JSX_NODES = {"jsx_element", "jsx_self_closing_element", "jsx_fragment"}


def params_of(value) -> str:
    if isinstance(value, str):
        return value
    return ", ".join(value or [])


def js_body(options: dict, indent: str = JS_INDENT) -> str:
    return body_lines(options.get("body") or f"// {TODO_IMPLEMENT}", indent)


def find_js_class(root: Node, name: str) -> Node | None:
    for node in walk(root):
        if node.type in ("class_declaration", "class") and node_text(
            node.child_by_field_name("name")
        ) == name:
            return node
    return None


def is_async(node: Node) -> bool:
    return any(c.type == "async" for c in node.children)


def contains_jsx(node: Node) -> bool:
    return any(n.type in JSX_NODES for n in walk(node))


class JavaScriptAdapter(FileAdapter):
    name = "javascript"
    exts = ["js", "jsx", "mjs"]
    default_type = "function"
    capabilities = {
        "create_function": True,
        "create_class": True,
        "create_component": True,
        "create_module": True,
        "add_function": True,
        "add_method": True,
        "supports_es6": True,
        "supports_jsx": True,
    }

    def creators(self):
        return {
            "function": self.create_function,
            "class": self.create_class,
            "component": self.create_component,
            "module": self.create_module,
        }

    def modifiers(self):
        return {
            "add_function": self.add_function,
            "add_method": self.add_method,
        }

    ### Generation ###

    def create_function(self, file_path: Path, options: dict) -> str:
        name = options.get("name") or "myFunction"
        params = params_of(options.get("params"))
        async_kw = "async " if options.get("async") else ""
        if options.get("arrow"):
            code = f"const {name} = {async_kw}({params}) => {{\n{js_body(options)}\n}};\n"
        else:
            code = f"{async_kw}function {name}({params}) {{\n{js_body(options)}\n}}\n"
        if options.get("export"):
            code += f"\nexport {{ {name} }};\n"
        return code

    def create_class(self, file_path: Path, options: dict) -> str:
        name = options.get("name") or "MyClass"
        extends = options.get("extends")
        code = f"class {name}" + (f" extends {extends}" if extends else "") + " {\n"

        members = []
        constructor = options.get("constructor")
        if constructor:
            lines = [f"constructor({params_of(constructor.get('params'))}) {{"]
            if extends:
                lines.append(f"{JS_INDENT}super();")
            if constructor.get("body"):
                lines.append(body_lines(constructor["body"], JS_INDENT))
            lines.append("}")
            members.append("\n".join(lines))
        for method in options.get("methods") or []:
            members.append(self._method(method))

        code += "\n\n".join(body_lines(m, JS_INDENT) for m in members)
        code += "\n}\n" if members else "}\n"
        if options.get("export", True):
            code += f"\nexport default {name};\n"
        return code

    def create_component(self, file_path: Path, options: dict) -> str:
        name = options.get("name") or "MyComponent"
        props = options.get("props") or []
        hooks = options.get("hooks") or []
        markup = f'<div className="{name}">\n  <h1>{name}</h1>\n</div>'

        named = ", { " + ", ".join(hooks) + " }" if hooks else ""
        code = f"import React{named} from 'react';\n\n"

        if options.get("functional", True):
            props_param = "{ " + ", ".join(props) + " }" if props else ""
            code += f"const {name} = ({props_param}) => {{\n"
            if "useState" in hooks:
                code += "  const [state, setState] = useState(null);\n\n"
            code += "  return (\n" + body_lines(markup, "    ") + "\n  );\n};\n"
        else:
            code += f"class {name} extends React.Component {{\n"
            code += "  render() {\n    return (\n"
            code += body_lines(markup, "      ") + "\n    );\n  }\n}\n"
        return code + f"\nexport default {name};\n"

    def create_module(self, file_path: Path, options: dict) -> str:
        sections = []
        imports = []
        for entry in options.get("imports") or []:
            if isinstance(entry, str):
                imports.append(f"import '{entry}';")
            else:
                alias = f" as {entry['as']}" if entry.get("as") else ""
                source = require(entry, "from", "import")
                imports.append(f"import {entry.get('what', '*')}{alias} from '{source}';")
        if imports:
            sections.append("\n".join(imports) + "\n")
        for function in options.get("functions") or []:
            sections.append(self.create_function(file_path, function))
        for cls in options.get("classes") or []:
            sections.append(self.create_class(file_path, {"export": False, **cls}))
        if options.get("exports"):
            sections.append("export { " + ", ".join(options["exports"]) + " };\n")
        return "\n".join(sections)

    def _method(self, method: dict) -> str:
        static = "static " if method.get("static") else ""
        async_kw = "async " if method.get("async") else ""
        name = require(method, "name", "method")
        params = params_of(method.get("params"))
        return f"{static}{async_kw}{name}({params}) {{\n{js_body(method)}\n}}"

    ### Modification ###

    def add_function(self, content: str, modification: dict) -> str:
        function = require(modification, "function", "add_function")
        code = self.create_function(Path(), function)
        return content.rstrip("\n") + "\n\n" + code

    def add_method(self, content: str, modification: dict) -> str:
        class_name = require(modification, "class", "add_method")
        method = require(modification, "method", "add_method")
        tree = parse(JS_LANGUAGE, content)
        decl = find_js_class(tree.root_node, class_name)
        if decl is None:
            raise EditError(f"Class '{class_name}' not found")
        body = decl.child_by_field_name("body")
        return append_to_body(content, body, self._method(method), JS_INDENT)

    ### Analysis ###

    def analyze_source(self, content: str) -> dict:
        root = parse(JS_LANGUAGE, content).root_node
        report = {
            "type": "javascript",
            "functions": [],
            "classes": [],
            "imports": [],
            "exports": [],
            "components": [],
        }
        for node in walk(root):
            if node.type in ("function_declaration", "generator_function_declaration"):
                name = node_text(node.child_by_field_name("name"))
                report["functions"].append(
                    {"name": name, "type": "function", "async": is_async(node)}
                )
                if name[:1].isupper() and contains_jsx(node):
                    report["components"].append({"name": name, "type": "functional"})
            elif node.type == "variable_declarator":
                value = node.child_by_field_name("value")
                if value is None or value.type not in FUNCTION_VALUES:
                    continue
                name = node_text(node.child_by_field_name("name"))
                kind = "arrow" if value.type == "arrow_function" else "function"
                report["functions"].append(
                    {"name": name, "type": kind, "async": is_async(value)}
                )
                if name[:1].isupper() and contains_jsx(value):
                    report["components"].append({"name": name, "type": "functional"})
            elif node.type == "class_declaration":
                report["classes"].append(self._class_info(node))
                heritage = report["classes"][-1]["extends"] or ""
                if re.fullmatch(r"(React\.)?(Pure)?Component", heritage):
                    report["components"].append(
                        {"name": report["classes"][-1]["name"], "type": "class"}
                    )
            elif node.type == "import_statement":
                report["imports"].append(import_info(node))
            elif node.type == "export_statement":
                report["exports"].extend(export_names(node))
        return report

    def _class_info(self, node: Node) -> dict:
        heritage = next((c for c in node.children if c.type == "class_heritage"), None)
        extends = None
        if heritage is not None and heritage.named_children:
            extends = node_text(heritage.named_children[-1])
        body = node.child_by_field_name("body")
        methods = [
            node_text(m.child_by_field_name("name"))
            for m in body.named_children
            if m.type == "method_definition"
        ]
        return {
            "name": node_text(node.child_by_field_name("name")),
            "extends": extends,
            "methods": methods,
        }

    def validate(self, content: str) -> bool:
        return is_valid_tree(parse(JS_LANGUAGE, content))

    def get_help(self) -> dict:
        return {
            "description": "JavaScript/JSX adapter for functions, classes, modules and React components",
            "types": list(self.creators()),
            "modifications": list(self.modifiers()),
            "options": {
                "name": "Function/class/component name",
                "params": "List of parameter names",
                "body": "Function/method body",
                "async": "Make the function async",
                "arrow": "Use arrow function syntax",
                "export": "Export the function/class",
                "extends": "Parent class",
                "constructor": "{params, body} for the class constructor",
                "methods": "List of {name, params, body, static, async}",
                "props": "Component prop names",
                "hooks": "React hooks to import",
                "functional": "Functional (default) or class component",
            },
            "examples": [
                {
                    "path": "utils.js",
                    "options": {
                        "type": "function",
                        "name": "formatDate",
                        "params": ["date", "format"],
                        "body": "return new Intl.DateTimeFormat(format).format(date);",
                        "arrow": True,
                    },
                },
                {
                    "path": "Button.jsx",
                    "options": {"type": "component", "name": "Button", "props": ["text", "onClick"]},
                },
            ],
        }


def import_info(node: Node) -> dict:
    source = node_text(node.child_by_field_name("source")).strip("'\"`")
    clause = next((c for c in node.named_children if c.type == "import_clause"), None)
    return {"what": node_text(clause), "from": source}


def export_names(node: Node) -> list[str]:
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
    names = []
    for specifier in walk(node):
        if specifier.type == "export_specifier":
            alias = specifier.child_by_field_name("alias")
            names.append(node_text(alias or specifier.child_by_field_name("name")))
    return names
