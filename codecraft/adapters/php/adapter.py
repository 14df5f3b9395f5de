from functools import partial
from pathlib import Path

from codecraft.adapters.base import FileAdapter
from codecraft.adapters.php.analyzer import analyze_tree
from codecraft.adapters.php.builder import build_file
from codecraft.adapters.php.editor import OPERATION_KINDS, EditDispatcher, PhpDocument
from codecraft.adapters.php.printer import PhpPrinter
from codecraft.constants import DEFAULT_INDENT


class PhpAdapter(FileAdapter):
    name = "php"
    exts = ["php"]
    default_type = "class"
    capabilities = {
        "create_class": True,
        "create_interface": True,
        "create_trait": True,
        "add_method": True,
        "add_property": True,
        "replace_method": True,
        "analyze": True,
        "validate": True,
    }

    def __init__(self, indent: str = DEFAULT_INDENT, strict_types: bool = True):
        self.printer = PhpPrinter(indent)
        self.dispatcher = EditDispatcher(self.printer)
        self.strict_types = strict_types

    def creators(self):
        return {
            kind: partial(self.create_declaration, kind=kind)
            for kind in ("class", "interface", "trait")
        }

    def create_declaration(self, file_path: Path, options: dict, kind: str) -> str:
        options = {**options, "name": options.get("name") or file_path.stem}
        return self.printer.file(build_file(options, kind), self.strict_types)

    def modifiers(self):
        return {
            kind: lambda content, modification: self.edit_source(content, [modification])
            for kind in OPERATION_KINDS
        }

    def edit_source(self, content: str, modifications: list[dict]) -> str:
        """Apply all modifications to one parsed document; any failure aborts the call."""
        document = PhpDocument.parse(content)
        return self.dispatcher.apply(document, modifications).text

    def analyze_source(self, content: str) -> dict:
        return analyze_tree(PhpDocument.parse(content).root).to_dict()

    def validate(self, content: str) -> bool:
        return not PhpDocument(content).root.has_error

    def get_help(self) -> dict:
        return {
            "description": "PHP classes, interfaces and traits; AST-based editing",
            "types": ["class", "interface", "trait"],
            "modifications": list(OPERATION_KINDS),
            "options": {
                "name": "Declaration name (defaults to the file name)",
                "namespace": "Namespace to wrap the declaration in",
                "extends": "Parent class (or parent interfaces)",
                "implements": "List of implemented interfaces",
                "abstract": "Declare the class abstract",
                "final": "Declare the class final",
                "constants": "Mapping of constant name to value",
                "properties": "List of {name, visibility, static, readonly, type, default}",
                "methods": "List of {name, visibility, static, abstract, return_type, params, body}",
            },
            "examples": [
                {
                    "path": "src/Models/User.php",
                    "options": {
                        "namespace": "App\\Models",
                        "extends": "Model",
                        "properties": [
                            {"name": "fillable", "visibility": "protected", "type": "array", "default": ["name", "email"]}
                        ],
                        "methods": [
                            {"name": "getName", "return_type": "string", "body": "return $this->name;"}
                        ],
                    },
                },
                {
                    "modifications": [
                        {"type": "add_property", "property": {"name": "email", "type": "string", "visibility": "private"}},
                        {"type": "replace_method", "method_name": "getName", "method": {"return_type": "?string", "body": "return $this->name ?? null;"}},
                    ],
                },
            ],
        }
