import ast
import libcst
import logging

from pathlib import Path

from codecraft.adapters.base import FileAdapter, require
from codecraft.adapters.utils import body_lines
from codecraft.exceptions import EditError, ParseError

logger = logging.getLogger(__name__)

PY_INDENT = "    "


def camel_case(stem: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in stem.replace("-", "_").split("_"))


def params_of(value, default: list[str]) -> str:
    if value is None:
        value = default
    if isinstance(value, str):
        return value
    return ", ".join(value)


def imports_block(imports) -> str:
    return "".join(f"{line}\n" for line in imports or [])


def py_function(record: dict, indent: str = "", method: bool = False) -> str:
    """Render a function (or a method when `method`, which defaults params to `self`)."""
    name = require(record, "name", "method" if method else "function")
    params = params_of(record.get("params"), ["self"] if method else [])
    returns = f" -> {record['return_type']}" if record.get("return_type") else ""
    async_kw = "async " if record.get("async") else ""

    lines = [f"{indent}@{decorator}" for decorator in record.get("decorators") or []]
    lines.append(f"{indent}{async_kw}def {name}({params}){returns}:")
    if record.get("docstring"):
        lines.append(f'{indent}{PY_INDENT}"""{record["docstring"]}"""')
    if record.get("body") or not record.get("docstring"):
        lines.append(body_lines(record.get("body") or "pass", indent + PY_INDENT))
    return "\n".join(lines) + "\n"


def py_methods(methods, indent: str = PY_INDENT) -> str:
    return "\n".join(py_function(m, indent, method=True) for m in methods or [])


def syntax_error(e: libcst.ParserSyntaxError) -> ParseError:
    return ParseError(
        f"Could not parse Python source: {e.message}", [(e.raw_line - 1, e.raw_column)]
    )


def parse_module(content: str) -> libcst.Module:
    try:
        return libcst.parse_module(content)
    except libcst.ParserSyntaxError as e:
        raise syntax_error(e) from e


def parse_definition(code: str) -> libcst.BaseStatement:
    try:
        return libcst.parse_statement(code)
    except libcst.ParserSyntaxError as e:
        raise ValueError(f"Generated code does not parse: {e.message}") from e


def is_import(statement: libcst.CSTNode) -> bool:
    return isinstance(statement, libcst.SimpleStatementLine) and all(
        isinstance(s, (libcst.Import, libcst.ImportFrom)) for s in statement.body
    )


def is_docstring(statement: libcst.CSTNode) -> bool:
    return (
        isinstance(statement, libcst.SimpleStatementLine)
        and len(statement.body) == 1
        and isinstance(statement.body[0], libcst.Expr)
        and isinstance(statement.body[0].value, (libcst.SimpleString, libcst.ConcatenatedString))
    )


def is_pass_only(body: libcst.IndentedBlock) -> bool:
    return (
        len(body.body) == 1
        and isinstance(body.body[0], libcst.SimpleStatementLine)
        and all(isinstance(s, libcst.Pass) for s in body.body[0].body)
    )


class MethodAppender(libcst.CSTTransformer):
    """Append a method to the body of every class named `class_name`."""

    def __init__(self, class_name: str, method: libcst.FunctionDef):
        self.class_name = class_name
        self.method = method
        self.found = False
        super().__init__()

    def leave_ClassDef(self, original_node, updated_node):
        if updated_node.name.value != self.class_name:
            return updated_node
        self.found = True
        body = updated_node.body
        if isinstance(body, libcst.SimpleStatementSuite):
            # `class A: pass` -> indented block
            body = libcst.IndentedBlock(body=[libcst.SimpleStatementLine(body=body.body)])
        if is_pass_only(body):
            statements = [self.method.with_changes(leading_lines=[])]
        else:
            statements = [*body.body, self.method.with_changes(leading_lines=[libcst.EmptyLine()])]
        return updated_node.with_changes(body=body.with_changes(body=statements))


class PythonAdapter(FileAdapter):
    name = "python"
    exts = ["py", "pyi"]
    default_type = "module"
    capabilities = {
        "create_class": True,
        "create_function": True,
        "create_dataclass": True,
        "create_fastapi": True,
        "create_django_model": True,
        "create_pytest": True,
        "add_method": True,
        "add_function": True,
        "add_import": True,
        "supports_type_hints": True,
        "supports_decorators": True,
        "supports_async": True,
    }

    def creators(self):
        return {
            "module": self.create_module,
            "class": self.create_class,
            "function": self.create_function,
            "dataclass": self.create_dataclass,
            "fastapi": self.create_fastapi,
            "django_model": self.create_django_model,
            "pytest": self.create_pytest,
        }

    def modifiers(self):
        return {
            "add_import": self.add_import,
            "add_function": self.add_function,
            "add_method": self.add_method,
        }

    ### Generation ###

    def class_code(self, options: dict, name: str) -> str:
        parents = options.get("parents") or []
        code = f"class {name}" + (f"({', '.join(parents)})" if parents else "") + ":\n"
        sections = []
        if options.get("docstring"):
            sections.append(f'{PY_INDENT}"""{options["docstring"]}"""\n')
        class_vars = []
        for var in options.get("class_variables") or []:
            annotation = f": {var['type']}" if var.get("type") else ""
            class_vars.append(f"{PY_INDENT}{require(var, 'name', 'class variable')}{annotation} = {var.get('value', 'None')}\n")
        if class_vars:
            sections.append("".join(class_vars))
        if options.get("methods"):
            sections.append(py_methods(options["methods"]))
        if not sections:
            sections.append(f"{PY_INDENT}pass\n")
        return code + "\n".join(sections)

    def create_class(self, file_path: Path, options: dict) -> str:
        name = options.get("name") or camel_case(file_path.stem) or "MyClass"
        imports = imports_block(options.get("imports"))
        return (imports + "\n\n" if imports else "") + self.class_code(options, name)

    def create_function(self, file_path: Path, options: dict) -> str:
        functions = options.get("functions") or [
            {"name": file_path.stem or "main", **options}
        ]
        imports = imports_block(options.get("imports"))
        code = "\n\n".join(py_function(f) for f in functions)
        return (imports + "\n\n" if imports else "") + code

    def create_dataclass(self, file_path: Path, options: dict) -> str:
        name = options.get("name") or camel_case(file_path.stem) or "MyData"
        code = "from dataclasses import dataclass\n" + imports_block(options.get("imports"))
        code += f"\n\n@dataclass\nclass {name}:\n"
        sections = []
        if options.get("docstring"):
            sections.append(f'{PY_INDENT}"""{options["docstring"]}"""\n')
        fields = []
        for record in options.get("fields") or []:
            line = f"{PY_INDENT}{require(record, 'name', 'field')}: {record.get('type', 'str')}"
            if record.get("default") is not None:
                line += f" = {record['default']}"
            fields.append(line + "\n")
        if fields:
            sections.append("".join(fields))
        if options.get("methods"):
            sections.append(py_methods(options["methods"]))
        return code + ("\n".join(sections) or f"{PY_INDENT}pass\n")

    def create_fastapi(self, file_path: Path, options: dict) -> str:
        code = "from fastapi import FastAPI\nfrom typing import List, Optional\n"
        code += imports_block(options.get("imports"))
        code += f"\napp = FastAPI(\n{PY_INDENT}title={options.get('title', 'FastAPI App')!r},\n"
        if options.get("description"):
            code += f"{PY_INDENT}description={options['description']!r},\n"
        code += f"{PY_INDENT}version={options.get('version', '1.0.0')!r},\n)\n"
        for endpoint in options.get("endpoints") or []:
            method = str(endpoint.get("method", "get")).lower()
            route = require(endpoint, "path", "endpoint")
            function = {
                "name": require(endpoint, "function", "endpoint"),
                "decorators": [f'app.{method}("{route}")'],
                **{k: endpoint[k] for k in ("params", "return_type", "body", "async") if k in endpoint},
            }
            code += "\n\n" + py_function(function)
        return code

    def create_django_model(self, file_path: Path, options: dict) -> str:
        name = options.get("name") or camel_case(file_path.stem) or "MyModel"
        code = "from django.db import models\n" + imports_block(options.get("imports"))
        code += f"\n\nclass {name}(models.Model):\n"
        sections = []
        fields = []
        for record in options.get("fields") or []:
            field_options = record.get("options") or []
            if isinstance(field_options, dict):
                field_options = [f"{k}={v}" for k, v in field_options.items()]
            fields.append(
                f"{PY_INDENT}{require(record, 'name', 'field')} = "
                f"models.{record.get('type', 'CharField')}({', '.join(map(str, field_options))})\n"
            )
        if fields:
            sections.append("".join(fields))
        meta = options.get("meta") or {}
        if meta:
            sections.append(
                f"{PY_INDENT}class Meta:\n"
                + "".join(f"{PY_INDENT * 2}{k} = {v}\n" for k, v in meta.items())
            )
        if options.get("methods"):
            sections.append(py_methods(options["methods"]))
        return code + ("\n".join(sections) or f"{PY_INDENT}pass\n")

    def create_pytest(self, file_path: Path, options: dict) -> str:
        code = "import pytest\n" + imports_block(options.get("imports"))
        blocks = []
        for fixture in options.get("fixtures") or []:
            scope = f'(scope="{fixture["scope"]}")' if fixture.get("scope") else ""
            blocks.append(
                py_function(
                    {
                        "name": require(fixture, "name", "fixture"),
                        "params": fixture.get("params", []),
                        "body": fixture.get("body"),
                        "decorators": [f"pytest.fixture{scope}"],
                    }
                )
            )
        tests = options.get("tests") or []
        if options.get("test_class"):
            blocks.append(f"class {options['test_class']}:\n" + (py_methods(tests) or f"{PY_INDENT}pass\n"))
        else:
            blocks.extend(py_function(test) for test in tests)
        return code + "".join("\n\n" + block for block in blocks)

    def create_module(self, file_path: Path, options: dict) -> str:
        head = []
        if options.get("docstring"):
            head.append(f'"""{options["docstring"]}"""\n')
        if options.get("imports"):
            head.append(imports_block(options["imports"]))
        if options.get("constants"):
            head.append(
                "".join(
                    f"{require(c, 'name', 'constant')} = {c.get('value', 'None')}\n"
                    for c in options["constants"]
                )
            )
        definitions = [py_function(f) for f in options.get("functions") or []]
        definitions += [
            self.class_code(c, require(c, "name", "class")) for c in options.get("classes") or []
        ]
        code = "\n".join(head)
        if definitions:
            code += ("\n\n" if code else "") + "\n\n".join(definitions)
        return code

    ### Modification ###

    def add_import(self, content: str, modification: dict) -> str:
        statement = parse_definition(require(modification, "import", "add_import"))
        if not is_import(statement):
            raise ValueError(f"Not an import statement: {modification['import']!r}")
        module = parse_module(content)
        existing = {module.code_for_node(s).strip() for s in module.body if is_import(s)}
        if module.code_for_node(statement).strip() in existing:
            logger.debug(f"Import already present: {modification['import']}")
            return content

        body = list(module.body)
        position = 0
        for index, node in enumerate(body):
            if is_import(node) or (index == 0 and is_docstring(node)):
                position = index + 1
        body.insert(position, statement)
        return module.with_changes(body=body).code

    def add_function(self, content: str, modification: dict) -> str:
        function = parse_definition(py_function(require(modification, "function", "add_function")))
        module = parse_module(content)
        if module.body:
            function = function.with_changes(leading_lines=[libcst.EmptyLine()] * 2)
        return module.with_changes(body=[*module.body, function]).code

    def add_method(self, content: str, modification: dict) -> str:
        class_name = modification.get("class_name") or require(modification, "class", "add_method")
        method = parse_definition(py_function(require(modification, "method", "add_method"), method=True))
        module = parse_module(content)
        transformer = MethodAppender(class_name, method)
        modified = module.visit(transformer)
        if not transformer.found:
            raise EditError(f"Class '{class_name}' not found")
        return modified.code

    ### Analysis ###

    def analyze_source(self, content: str) -> dict:
        try:
            tree = ast.parse(content)
        except SyntaxError as e:
            raise ParseError(
                f"Could not parse Python source: {e.msg}", [((e.lineno or 1) - 1, (e.offset or 1) - 1)]
            ) from e

        report = {
            "type": "python",
            "imports": [],
            "classes": [],
            "functions": [],
            "variables": [],
            "decorators": [],
        }
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                report["imports"].append(
                    {"line": node.lineno, "type": "import", "module": ", ".join(a.name for a in node.names)}
                )
            elif isinstance(node, ast.ImportFrom):
                report["imports"].append(
                    {
                        "line": node.lineno,
                        "type": "from",
                        "module": "." * node.level + (node.module or ""),
                        "names": [a.name for a in node.names],
                    }
                )
            if isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
                for decorator in node.decorator_list:
                    target = decorator.func if isinstance(decorator, ast.Call) else decorator
                    report["decorators"].append(
                        {"line": decorator.lineno, "name": ast.unparse(target), "target": node.name}
                    )

        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                report["classes"].append(
                    {
                        "line": node.lineno,
                        "name": node.name,
                        "parents": [ast.unparse(b) for b in node.bases],
                        "methods": [
                            m.name
                            for m in node.body
                            if isinstance(m, (ast.FunctionDef, ast.AsyncFunctionDef))
                        ],
                    }
                )
            elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                report["functions"].append(
                    {
                        "line": node.lineno,
                        "name": node.name,
                        "params": [a.arg for a in node.args.posonlyargs + node.args.args + node.args.kwonlyargs],
                        "return_type": ast.unparse(node.returns) if node.returns else None,
                        "async": isinstance(node, ast.AsyncFunctionDef),
                    }
                )
            elif isinstance(node, (ast.Assign, ast.AnnAssign)):
                targets = node.targets if isinstance(node, ast.Assign) else [node.target]
                for target in targets:
                    for name in ast.walk(target):
                        if isinstance(name, ast.Name):
                            report["variables"].append({"line": node.lineno, "name": name.id})
        return report

    def validate(self, content: str) -> bool:
        try:
            ast.parse(content)
        except (SyntaxError, ValueError):
            return False
        return True

    def get_help(self) -> dict:
        return {
            "description": "Python adapter for creating classes, functions, FastAPI apps, Django models, and more",
            "types": list(self.creators()),
            "modifications": list(self.modifiers()),
            "options": {
                "name": "Class/function name",
                "docstring": "Documentation string",
                "imports": "List of import statements",
                "parents": "List of parent classes",
                "class_variables": "List of {name, type, value}",
                "methods": "List of {name, params, return_type, body, decorators, async, docstring}",
                "fields": "Dataclass/Django model fields",
                "endpoints": "FastAPI endpoints as {path, method, function, params, return_type, body}",
                "fixtures": "pytest fixtures as {name, body, scope}",
                "tests": "pytest test functions",
                "test_class": "Group tests under this class",
            },
            "examples": [
                {
                    "path": "user.py",
                    "options": {
                        "type": "class",
                        "name": "User",
                        "parents": ["BaseModel"],
                        "methods": [
                            {
                                "name": "__init__",
                                "params": ["self", "name: str"],
                                "body": "self.name = name",
                            }
                        ],
                    },
                },
                {
                    "modifications": [
                        {"type": "add_import", "import": "from typing import Any"},
                        {"type": "add_method", "class_name": "User", "method": {"name": "greet"}},
                    ]
                },
            ],
        }
