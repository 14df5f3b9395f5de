import pytest

from codecraft.adapters.php import PhpAdapter
from codecraft.exceptions import EditError, ParseError


@pytest.fixture
def adapter():
    return PhpAdapter()


def test_create_class(adapter):
    content = adapter.create(
        "src/Models/User.php",
        {
            "namespace": "App\\Models",
            "extends": "Model",
            "properties": [{"name": "name", "type": "string", "visibility": "protected"}],
            "methods": [
                {"name": "getName", "return_type": "string", "body": "return $this->name;"}
            ],
        },
    )
    assert content == """<?php

declare(strict_types=1);

namespace App\\Models;

class User extends Model
{
    protected string $name;

    public function getName(): string
    {
        return $this->name;
    }
}
"""
    assert adapter.validate(content)


def test_create_defaults_name_from_file(adapter):
    content = adapter.create("Invoice.php", {})
    assert "\nclass Invoice\n{\n}\n" in content


def test_create_without_strict_types():
    content = PhpAdapter(strict_types=False).create("A.php", {})
    assert content == "<?php\n\nclass A\n{\n}\n"


def test_create_keeps_multiline_strings(adapter):
    content = adapter.create(
        "Banner.php",
        {
            "properties": [{"name": "text", "default": "x\ny"}],
            "methods": [
                {
                    "name": "render",
                    "params": [{"name": "glue", "default": "\n"}],
                    "body": "return 'line1\nline2';",
                }
            ],
        },
    )
    assert '    public $text = "x\\ny";\n' in content
    assert "\n        return 'line1\nline2';\n    }\n" in content
    report = adapter.analyze_source(content)
    assert report["classes"][0]["properties"][0]["default"] == '"x\\ny"'
    assert report["classes"][0]["methods"][0]["params"][0]["default"] == '"\\n"'


def test_create_interface(adapter):
    content = adapter.create(
        "Repository.php",
        {
            "type": "interface",
            "extends": ["Countable"],
            "methods": [{"name": "find", "params": [{"name": "id", "type": "int"}], "return_type": "?array"}],
        },
    )
    assert "interface Repository extends Countable\n{\n" in content
    assert "    public function find(int $id): ?array;\n" in content
    assert adapter.validate(content)


def test_create_trait_and_constants(adapter):
    content = adapter.create(
        "Greets.php",
        {"type": "trait", "properties": [{"name": "greeting", "default": "Hello"}]},
    )
    assert "trait Greets\n{\n    public $greeting = 'Hello';\n}\n" in content
    content = adapter.create("Status.php", {"final": True, "constants": {"ACTIVE": 1, "LABELS": ["a"]}})
    assert "final class Status\n{\n    public const ACTIVE = 1;\n    public const LABELS = ['a'];\n}" in content


def test_create_unknown_type(adapter):
    with pytest.raises(ValueError, match="Unknown php type: enum"):
        adapter.create("A.php", {"type": "enum"})


def test_created_file_analyzes(adapter, tmp_path):
    path = tmp_path / "User.php"
    path.write_text(
        adapter.create(
            path,
            {
                "abstract": True,
                "implements": ["JsonSerializable"],
                "methods": [{"name": "jsonSerialize", "return_type": "array", "body": "return [];"}],
            },
        )
    )
    report = adapter.analyze(path)
    assert report["classes"][0]["abstract"]
    assert report["classes"][0]["implements"] == ["JsonSerializable"]
    assert report["classes"][0]["methods"][0]["return_type"] == "array"


def test_edit_scenario(adapter, php_greeter):
    content = adapter.edit(
        php_greeter,
        [
            {
                "type": "add_method",
                "method": {
                    "name": "setName",
                    "params": [{"name": "name", "type": "string"}],
                    "body": "$this->name = $name;",
                },
            }
        ],
    )
    php_greeter.write_text(content)
    methods = adapter.analyze(php_greeter)["classes"][0]["methods"]
    assert len(methods) == 2
    assert {m["name"] for m in methods} == {"getName", "setName"}
    set_name = next(m for m in methods if m["name"] == "setName")
    assert [p["name"] for p in set_name["params"]] == ["name"]


def test_edit_does_not_write(adapter, php_greeter):
    before = php_greeter.read_text()
    adapter.edit(php_greeter, [{"type": "add_method", "method": {"name": "x"}}])
    assert php_greeter.read_text() == before


def test_edit_source_errors(adapter, test_file_php_broken):
    with pytest.raises(ParseError):
        adapter.edit(test_file_php_broken, [])
    with pytest.raises(EditError):
        adapter.edit_source("<?php\n", [{"type": "add_method", "method": {"name": "x"}}])
    with pytest.raises(FileNotFoundError):
        adapter.edit("missing.php", [])


def test_single_modification_handlers(adapter):
    handler = adapter.modifiers()["add_property"]
    result = handler("<?php\nclass A\n{\n}\n", {"type": "add_property", "property": {"name": "x"}})
    assert "    public $x;\n" in result


def test_apply_modification_matches_edit_source(adapter):
    source = "<?php\nclass A\n{\n}\n"
    modification = {"type": "add_method", "method": {"name": "run"}}
    assert adapter.apply_modification(source, modification) == adapter.edit_source(source, [modification])
    with pytest.raises(ValueError, match="Unknown modification type: rename"):
        adapter.apply_modification(source, {"type": "rename"})


def test_validate(adapter, test_file_php, test_file_php_broken):
    assert adapter.validate(test_file_php.read_text())
    assert adapter.validate(test_file_php_broken.read_text()) is False
    assert adapter.validate("<?php\nclass A {\n") is False


def test_analyze_broken_file(adapter, test_file_php_broken):
    with pytest.raises(ParseError):
        adapter.analyze(test_file_php_broken)


def test_help(adapter):
    info = adapter.get_help()
    assert info["types"] == ["class", "interface", "trait"]
    assert "replace_method" in info["modifications"]
    assert adapter.supports(".PHP")
    assert not adapter.supports("js")
