"""
JSON / JSONC adapter.

Edits work on the decoded document: each modification addresses a value by a
dot-separated path ("database.host", "plugins.0.name"), missing intermediate objects
are created on the way down and nothing outside the addressed key is touched. The
result is re-encoded, so comments in a `.jsonc` file do not survive an edit.
"""

import copy
import json
import re

from pathlib import Path

from codecraft.adapters.base import FileAdapter, require
from codecraft.exceptions import ParseError

JSON_INDENT = 4
JSON_SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"

# Strings are matched first so that `//` inside a string value is left alone
COMMENT_OR_STRING = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.S)


def strip_json_comments(text: str) -> str:
    return COMMENT_OR_STRING.sub(lambda m: m.group(1) or "", text)


def decode(text: str):
    try:
        return json.loads(strip_json_comments(text))
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e.msg}", [(e.lineno - 1, e.colno - 1)]) from e


def encode(data, pretty: bool = True) -> str:
    if pretty:
        return json.dumps(data, indent=JSON_INDENT, ensure_ascii=False) + "\n"
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def deep_merge(base, incoming):
    """Merge `incoming` into a copy of `base`; nested objects merge, anything else replaces."""
    if not isinstance(base, dict) or not isinstance(incoming, dict):
        return copy.deepcopy(incoming)
    merged = copy.deepcopy(base)
    for key, value in incoming.items():
        merged[key] = deep_merge(merged[key], value) if key in merged else copy.deepcopy(value)
    return merged


def split_path(path) -> list[str]:
    keys = str(path).split(".")
    if not all(keys):
        raise ValueError(f"Invalid path: '{path}'")
    return keys


def step(container, key: str, create: bool):
    """Child of `container` at `key`; with `create`, a missing key becomes an empty object."""
    if isinstance(container, list):
        if key.isdigit() and int(key) < len(container):
            return container[int(key)]
        raise ValueError(f"No index {key} in array of length {len(container)}")
    if not isinstance(container, dict):
        raise ValueError(f"Cannot descend into {type(container).__name__} value at '{key}'")
    if key not in container or container[key] is None:
        if not create:
            return None
        container[key] = {}
    return container[key]


def assign(container, key: str, value):
    if isinstance(container, list):
        if not (key.isdigit() and int(key) < len(container)):
            raise ValueError(f"No index {key} in array of length {len(container)}")
        container[int(key)] = value
    elif isinstance(container, dict):
        container[key] = value
    else:
        raise ValueError(f"Cannot set '{key}' on {type(container).__name__} value")


def set_value(data, path, value):
    data = copy.deepcopy(data)
    *parents, last = split_path(path)
    current = data
    for key in parents:
        current = step(current, key, create=True)
    assign(current, last, copy.deepcopy(value))
    return data


def unset_value(data, path):
    data = copy.deepcopy(data)
    *parents, last = split_path(path)
    current = data
    for key in parents:
        current = step(current, key, create=False)
        if current is None:
            return data
    if isinstance(current, dict):
        current.pop(last, None)
    elif isinstance(current, list) and last.isdigit() and int(last) < len(current):
        del current[int(last)]
    return data


def insert_value(data, path, value, at_end: bool = True):
    data = copy.deepcopy(data)
    *parents, last = split_path(path)
    current = data
    for key in parents:
        current = step(current, key, create=True)
    target = step(current, last, create=False)
    if target is None or target == {}:
        target = []
    elif not isinstance(target, list):
        target = [target]
    target = target + [value] if at_end else [value] + target
    assign(current, last, target)
    return data


def json_type(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "array" if isinstance(value, list) else "object"


def extract_keys(data, prefix: str = "") -> list[str]:
    if isinstance(data, dict):
        items = data.items()
    elif isinstance(data, list):
        items = enumerate(data)
    else:
        return []
    keys = []
    for key, value in items:
        full_key = f"{prefix}.{key}" if prefix else str(key)
        keys.append(full_key)
        keys.extend(extract_keys(value, full_key))
    return keys


def depth_of(data) -> int:
    children = data.values() if isinstance(data, dict) else data if isinstance(data, list) else []
    nested = [1 + depth_of(v) for v in children if isinstance(v, (dict, list))]
    return max(nested, default=0)


def detect_type(data) -> str:
    if isinstance(data, list):
        return "array"
    if not isinstance(data, dict):
        return "primitive"
    if "name" in data and "version" in data:
        return "package"
    if "$schema" in data:
        return "schema"
    if "compilerOptions" in data:
        return "tsconfig"
    if "rules" in data or "extends" in data:
        return "eslint"
    return "object"


def seed_from_schema(schema: dict) -> dict:
    empty = {"string": "", "number": 0, "integer": 0, "boolean": False, "array": [], "object": {}}
    data = {}
    for key, prop in (schema.get("properties") or {}).items():
        kind = prop.get("type", "string")
        data[key] = prop["default"] if "default" in prop else copy.deepcopy(empty.get(kind))
    return data


class JsonAdapter(FileAdapter):
    name = "json"
    exts = ["json", "jsonc"]
    default_type = "object"
    capabilities = {
        "create_config": True,
        "create_package_json": True,
        "create_schema": True,
        "merge_objects": True,
        "set_value": True,
        "get_value": True,
        "supports_comments": False,
        "supports_jsonc": True,
        "pretty_print": True,
    }

    def creators(self):
        return {
            "object": self.create_object,
            "array": self.create_array,
            "config": self.create_config,
            "package": self.create_package,
            "schema": self.create_schema,
            "tsconfig": self.create_tsconfig,
            "eslint": self.create_eslint,
        }

    def modifiers(self):
        return {
            "set": lambda content, m: self.edit_source(content, [m]),
            "unset": lambda content, m: self.edit_source(content, [m]),
            "merge": lambda content, m: self.edit_source(content, [m]),
            "append": lambda content, m: self.edit_source(content, [m]),
            "prepend": lambda content, m: self.edit_source(content, [m]),
        }

    ### Generation ###

    def create_object(self, file_path: Path, options: dict) -> str:
        data = dict(options.get("data") or {})
        if options.get("schema"):
            data = {**seed_from_schema(options["schema"]), **data}
        return encode(data, options.get("pretty", True))

    def create_array(self, file_path: Path, options: dict) -> str:
        item_type = options.get("item_type", "mixed")
        items = []
        for item in options.get("items") or []:
            if item_type == "string":
                items.append(str(item))
            elif item_type == "number":
                try:
                    items.append(float(item))
                except (TypeError, ValueError):
                    items.append(0)
            elif item_type == "object":
                items.append(item if isinstance(item, dict) else {"value": item})
            else:
                items.append(item)
        return encode(items, options.get("pretty", True))

    def create_config(self, file_path: Path, options: dict) -> str:
        environment = options.get("environment", "development")
        config = {
            "name": options.get("app_name", "MyApp"),
            "version": options.get("version", "1.0.0"),
            "environment": environment,
            "debug": environment == "development",
            "database": {
                "host": options.get("db_host", "localhost"),
                "port": options.get("db_port", 3306),
                "name": options.get("db_name", "database"),
                "username": options.get("db_user", "user"),
                "password": options.get("db_pass", ""),
            },
            "cache": {
                "driver": options.get("cache_driver", "file"),
                "ttl": options.get("cache_ttl", 3600),
            },
            "logging": {
                "level": "debug" if environment == "development" else "error",
                "file": options.get("log_file", "app.log"),
            },
        }
        if options.get("settings"):
            config = deep_merge(config, options["settings"])
        return encode(config, options.get("pretty", True))

    def create_package(self, file_path: Path, options: dict) -> str:
        package = {
            "name": options.get("name", "my-package"),
            "version": options.get("version", "1.0.0"),
            "description": options.get("description", ""),
            "main": options.get("main", "index.js"),
            "scripts": options.get("scripts")
            or {"test": 'echo "Error: no test specified" && exit 1'},
            "keywords": options.get("keywords", []),
            "author": options.get("author", ""),
            "license": options.get("license", "MIT"),
        }
        for key in ("dependencies", "devDependencies", "repository"):
            if key in options:
                package[key] = options[key]
        return encode(package, options.get("pretty", True))

    def create_schema(self, file_path: Path, options: dict) -> str:
        schema_type = options.get("schema_type", "object")
        schema = {
            "$schema": JSON_SCHEMA_DRAFT,
            "$id": options.get("id", "https://example.com/schema.json"),
            "title": options.get("title", "Schema"),
            "type": schema_type,
        }
        if schema_type == "object":
            schema["properties"] = options.get("properties", {})
            schema["required"] = options.get("required", [])
            schema["additionalProperties"] = options.get("additionalProperties", False)
        elif schema_type == "array":
            schema["items"] = options.get("items", {"type": "string"})
        if "description" in options:
            schema["description"] = options["description"]
        return encode(schema, options.get("pretty", True))

    def create_tsconfig(self, file_path: Path, options: dict) -> str:
        compiler_defaults = {
            "target": "ES2020",
            "module": "commonjs",
            "lib": ["ES2020"],
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
        }
        compiler = {key: options.get(key, default) for key, default in compiler_defaults.items()}
        compiler["forceConsistentCasingInFileNames"] = True
        compiler["declaration"] = options.get("declaration", False)
        compiler["sourceMap"] = options.get("sourceMap", True)
        config = {
            "compilerOptions": compiler,
            "include": options.get("include", ["src/**/*"]),
            "exclude": options.get("exclude", ["node_modules", "dist"]),
        }
        return encode(config, options.get("pretty", True))

    def create_eslint(self, file_path: Path, options: dict) -> str:
        config = {
            "env": {
                "browser": options.get("browser", True),
                "node": options.get("node", False),
                "es2021": True,
            },
            "extends": options.get("extends", ["eslint:recommended"]),
            "parserOptions": {
                "ecmaVersion": options.get("ecmaVersion", 12),
                "sourceType": options.get("sourceType", "module"),
            },
            "rules": options.get(
                "rules",
                {
                    "indent": ["error", 2],
                    "linebreak-style": ["error", "unix"],
                    "quotes": ["error", "single"],
                    "semi": ["error", "always"],
                },
            ),
        }
        if "parser" in options:
            config["parser"] = options["parser"]
        return encode(config, options.get("pretty", True))

    ### Modification ###

    def edit_source(self, content: str, modifications: list[dict]) -> str:
        data = decode(content)
        for modification in modifications:
            data = self.apply(data, modification)
        return encode(data)

    def apply(self, data, modification: dict):
        """Apply one modification to decoded data, returning the new value."""
        kind = modification.get("type")
        if kind == "set":
            if "value" not in modification:
                raise ValueError("set requires 'value'")
            return set_value(data, require(modification, "path", kind), modification["value"])
        if kind == "unset":
            return unset_value(data, require(modification, "path", kind))
        if kind == "merge":
            incoming = modification.get("data")
            if not isinstance(incoming, dict):
                raise ValueError("merge requires a 'data' object")
            return deep_merge(data, incoming)
        if kind in ("append", "prepend"):
            if "value" not in modification:
                raise ValueError(f"{kind} requires 'value'")
            return insert_value(
                data,
                require(modification, "path", kind),
                modification["value"],
                at_end=kind == "append",
            )
        raise ValueError(f"Unknown modification type: {kind}")

    ### Analysis ###

    def analyze_source(self, content: str) -> dict:
        try:
            data = decode(content)
        except ParseError as e:
            return {"type": "json", "valid": False, "error": str(e)}

        if isinstance(data, (dict, list)):
            structure = {
                "type": json_type(data),
                "count": len(data),
                "keys": list(data) if isinstance(data, dict) else None,
            }
        else:
            structure = {"type": json_type(data), "value": data}
        return {
            "type": "json",
            "valid": True,
            "structure": structure,
            "keys": extract_keys(data),
            "depth": depth_of(data),
            "size": len(content.encode("utf8")),
            "detected_type": detect_type(data),
        }

    def validate(self, content: str) -> bool:
        try:
            decode(content)
        except ParseError:
            return False
        return True

    def get_help(self) -> dict:
        return {
            "description": "JSON adapter for creating configs, package.json, schemas, and data files",
            "types": list(self.creators()),
            "modifications": list(self.modifiers()),
            "options": {
                "data": "JSON data for object type",
                "schema": "JSON Schema whose properties seed the object",
                "items": "Array items for array type",
                "item_type": "string, number, object or mixed",
                "pretty": "Pretty print JSON (boolean)",
                "app_name": "Application name (config)",
                "environment": "development or production (config)",
                "settings": "Extra settings merged into the config",
                "name": "Package name (package)",
                "dependencies": "Production dependencies (package)",
                "scripts": "NPM scripts (package)",
            },
            "examples": [
                {
                    "path": "package.json",
                    "options": {
                        "type": "package",
                        "name": "my-app",
                        "dependencies": {"react": "^18.2.0"},
                        "scripts": {"dev": "vite", "build": "vite build"},
                    },
                },
                {
                    "modifications": [
                        {"type": "set", "path": "database.host", "value": "localhost"},
                        {"type": "append", "path": "features", "value": "export"},
                        {"type": "merge", "data": {"new_setting": "value"}},
                    ]
                },
            ],
        }
