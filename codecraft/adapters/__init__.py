from codecraft.adapters.base import FileAdapter
from codecraft.adapters.css import CssAdapter
from codecraft.adapters.javascript import JavaScriptAdapter
from codecraft.adapters.jsonfile import JsonAdapter
from codecraft.adapters.php import PhpAdapter
from codecraft.adapters.python import PythonAdapter
from codecraft.adapters.typescript import TypeScriptAdapter
from codecraft.constants import DEFAULT_INDENT


def default_adapters(
    indent: str = DEFAULT_INDENT, php_strict_types: bool = True
) -> list[FileAdapter]:
    """One instance of every built-in adapter, PHP configured with the given printer settings."""
    return [
        PhpAdapter(indent=indent, strict_types=php_strict_types),
        JavaScriptAdapter(),
        TypeScriptAdapter(),
        CssAdapter(),
        JsonAdapter(),
        PythonAdapter(),
    ]


__all__ = [
    "CssAdapter",
    "FileAdapter",
    "JavaScriptAdapter",
    "JsonAdapter",
    "PhpAdapter",
    "PythonAdapter",
    "TypeScriptAdapter",
    "default_adapters",
]
