import pytest

from codecraft.adapters.python import PythonAdapter, camel_case
from codecraft.exceptions import EditError, ParseError


@pytest.fixture
def adapter():
    return PythonAdapter()


def test_create_class(adapter):
    content = adapter.create(
        "user.py",
        {
            "type": "class",
            "name": "User",
            "parents": ["BaseModel"],
            "docstring": "A user.",
            "class_variables": [{"name": "table", "type": "str", "value": "'users'"}],
            "methods": [
                {"name": "__init__", "params": ["self", "name: str"], "body": "self.name = name"},
                {"name": "greet", "return_type": "str", "body": "return f'hi {self.name}'"},
            ],
        },
    )
    assert content == '''class User(BaseModel):
    """A user."""

    table: str = 'users'

    def __init__(self, name: str):
        self.name = name

    def greet(self) -> str:
        return f'hi {self.name}'
'''
    assert adapter.validate(content)


def test_create_class_defaults(adapter):
    assert adapter.create("order_item.py", {"type": "class"}) == "class OrderItem:\n    pass\n"
    assert camel_case("http-client") == "HttpClient"


def test_create_functions(adapter):
    single = adapter.create(
        "helpers.py",
        {
            "type": "function",
            "name": "add",
            "params": ["a: int", "b: int"],
            "return_type": "int",
            "body": "return a + b",
            "decorators": ["cache"],
        },
    )
    assert single == "@cache\ndef add(a: int, b: int) -> int:\n    return a + b\n"

    several = adapter.create(
        "helpers.py",
        {"type": "function", "imports": ["import os"], "functions": [{"name": "a"}, {"name": "b", "async": True}]},
    )
    assert several == "import os\n\n\ndef a():\n    pass\n\n\nasync def b():\n    pass\n"


def test_create_dataclass(adapter):
    content = adapter.create(
        "models.py",
        {
            "type": "dataclass",
            "name": "Product",
            "fields": [{"name": "id", "type": "int"}, {"name": "price", "type": "float", "default": "0.0"}],
        },
    )
    assert content == "from dataclasses import dataclass\n\n\n@dataclass\nclass Product:\n    id: int\n    price: float = 0.0\n"


def test_create_fastapi(adapter):
    content = adapter.create(
        "main.py",
        {
            "type": "fastapi",
            "title": "Shop",
            "endpoints": [
                {"path": "/items", "method": "GET", "function": "list_items", "return_type": "list", "body": "return []"}
            ],
        },
    )
    assert "app = FastAPI(\n    title='Shop',\n    version='1.0.0',\n)\n" in content
    assert content.endswith('@app.get("/items")\ndef list_items() -> list:\n    return []\n')
    assert adapter.validate(content)
    assert adapter.analyze_source(content)["decorators"][0]["name"] == "app.get"


def test_create_django_model(adapter):
    content = adapter.create(
        "models.py",
        {
            "type": "django_model",
            "name": "Article",
            "fields": [
                {"name": "title", "options": {"max_length": 200}},
                {"name": "author", "type": "ForeignKey", "options": ["User", "on_delete=models.CASCADE"]},
            ],
            "meta": {"ordering": "['-id']"},
            "methods": [{"name": "__str__", "return_type": "str", "body": "return self.title"}],
        },
    )
    assert content == (
        "from django.db import models\n\n\n"
        "class Article(models.Model):\n"
        "    title = models.CharField(max_length=200)\n"
        "    author = models.ForeignKey(User, on_delete=models.CASCADE)\n"
        "\n"
        "    class Meta:\n"
        "        ordering = ['-id']\n"
        "\n"
        "    def __str__(self) -> str:\n"
        "        return self.title\n"
    )
    assert adapter.validate(content)


def test_create_pytest(adapter):
    content = adapter.create(
        "test_math.py",
        {
            "type": "pytest",
            "imports": ["from app import add"],
            "fixtures": [{"name": "numbers", "body": "return [1, 2]"}],
            "tests": [{"name": "test_add", "params": ["numbers"], "body": "assert add(*numbers) == 3"}],
        },
    )
    assert content == (
        "import pytest\nfrom app import add\n\n\n"
        "@pytest.fixture\ndef numbers():\n    return [1, 2]\n\n\n"
        "def test_add(numbers):\n    assert add(*numbers) == 3\n"
    )
    grouped = adapter.create(
        "test_math.py", {"type": "pytest", "test_class": "TestMath", "tests": [{"name": "test_one", "body": "assert True"}]}
    )
    assert grouped.endswith("class TestMath:\n    def test_one(self):\n        assert True\n")


def test_create_module(adapter):
    content = adapter.create(
        "helpers.py",
        {
            "docstring": "Helpers.",
            "imports": ["import os"],
            "constants": [{"name": "LIMIT", "value": "10"}],
            "functions": [{"name": "f"}],
            "classes": [{"name": "C"}],
        },
    )
    assert content == '"""Helpers."""\n\nimport os\n\nLIMIT = 10\n\n\ndef f():\n    pass\n\n\nclass C:\n    pass\n'
    assert adapter.validate(content)


def test_add_import(adapter, test_file_py):
    result = adapter.edit(test_file_py, [{"type": "add_import", "import": "import sys"}])
    assert "from dataclasses import dataclass, field\nimport sys\n\nDEFAULT_LOCATION" in result
    assert adapter.edit(test_file_py, [{"type": "add_import", "import": "import os"}]) == test_file_py.read_text()


def test_add_import_after_docstring(adapter):
    result = adapter.edit_source('"""Doc."""\n\nx = 1\n', [{"type": "add_import", "import": "import os"}])
    assert result == '"""Doc."""\nimport os\n\nx = 1\n'
    with pytest.raises(ValueError, match="Not an import statement"):
        adapter.edit_source("x = 1\n", [{"type": "add_import", "import": "x = 2"}])


def test_add_function(adapter, test_file_py):
    result = adapter.edit(test_file_py, [{"type": "add_function", "function": {"name": "ping"}}])
    assert result.endswith("    return inventory\n\n\ndef ping():\n    pass\n")
    assert adapter.validate(result)


def test_add_method(adapter, test_file_py):
    result = adapter.edit(
        test_file_py,
        [
            {
                "type": "add_method",
                "class_name": "Inventory",
                "method": {"name": "count", "return_type": "int", "body": "return len(self.items)"},
            }
        ],
    )
    assert (
        "        self.items.append(item)\n\n    def count(self) -> int:\n        return len(self.items)\n"
        in result
    )
    inventory = next(c for c in adapter.analyze_source(result)["classes"] if c["name"] == "Inventory")
    assert inventory["methods"] == ["__init__", "add", "count"]


def test_add_method_replaces_lone_pass(adapter):
    for source in ("class A: pass\n", "class A:\n    pass\n"):
        result = adapter.edit_source(source, [{"type": "add_method", "class": "A", "method": {"name": "run"}}])
        assert result == "class A:\n    def run(self):\n        pass\n"


def test_edit_errors(adapter):
    with pytest.raises(EditError, match="Class 'Missing' not found"):
        adapter.edit_source("class A:\n    pass\n", [{"type": "add_method", "class": "Missing", "method": {"name": "x"}}])
    with pytest.raises(ParseError):
        adapter.edit_source("def broken(:\n", [{"type": "add_function", "function": {"name": "x"}}])


def test_analyze(adapter, test_file_py):
    report = adapter.analyze(test_file_py)
    assert report["imports"] == [
        {"line": 3, "type": "import", "module": "os"},
        {"line": 4, "type": "from", "module": "dataclasses", "names": ["dataclass", "field"]},
    ]
    assert report["decorators"] == [{"line": 9, "name": "dataclass", "target": "Item"}]
    assert [(c["name"], c["line"]) for c in report["classes"]] == [("Item", 10), ("Inventory", 15)]
    assert report["classes"][1]["methods"] == ["__init__", "add"]
    assert report["functions"] == [
        {"line": 23, "name": "total_quantity", "params": ["items"], "return_type": "int", "async": False},
        {"line": 27, "name": "refresh", "params": ["inventory"], "return_type": None, "async": True},
    ]
    assert report["variables"] == [{"line": 6, "name": "DEFAULT_LOCATION"}]


def test_analyze_syntax_error(adapter):
    with pytest.raises(ParseError, match="Could not parse Python source"):
        adapter.analyze_source("def x(:\n")


def test_validate(adapter, test_file_py):
    assert adapter.validate(test_file_py.read_text())
    assert adapter.validate("def x(:\n") is False
