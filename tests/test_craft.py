import json
import pytest

from codecraft import CodeCraft
from codecraft.adapters import JsonAdapter
from codecraft.config import Settings
from codecraft.exceptions import EditError


@pytest.fixture
def craft():
    return CodeCraft.default()


def test_write_creates_directories(craft, tmp_path):
    path = tmp_path / "src" / "Models" / "User.php"
    assert craft.write(path, {"namespace": "App\\Models"})
    content = path.read_text()
    assert content.startswith("<?php\n\ndeclare(strict_types=1);\n\nnamespace App\\Models;\n")
    assert craft.validate(path)


def test_write_reports_io_failure(craft, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    assert craft.write(blocker / "User.php", {}) is False


def test_create_input_errors_raise(craft, tmp_path):
    with pytest.raises(ValueError, match="Unknown php type"):
        craft.write(tmp_path / "A.php", {"type": "enum"})
    with pytest.raises(KeyError):
        craft.create("notes.txt", {})


def test_edit_file_scenario(craft, php_greeter):
    assert craft.edit_file(
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
    methods = craft.analyze(php_greeter)["classes"][0]["methods"]
    assert [m["name"] for m in methods] == ["getName", "setName"]


def test_failed_edit_leaves_file_untouched(craft, php_greeter):
    before = php_greeter.read_text()
    with pytest.raises(EditError):
        craft.edit_file(
            php_greeter,
            [
                {"type": "add_method", "method": {"name": "ok"}},
                {"type": "replace_method", "method_name": "missing", "method": {"name": "x"}},
            ],
        )
    assert php_greeter.read_text() == before


def test_json_dot_path_scenario(craft, tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"a": {"b": 1}}')
    assert craft.edit_file(path, [{"type": "set", "path": "a.c", "value": 2}])
    assert json.loads(path.read_text()) == {"a": {"b": 1, "c": 2}}


def test_validate(craft, tmp_path, test_file_php_broken):
    assert craft.validate(test_file_php_broken) is False
    assert craft.validate(tmp_path / "missing.php") is False
    broken_css = tmp_path / "broken.css"
    broken_css.write_text(".a {\n  color: red;\n")
    assert craft.validate(broken_css) is False


def test_missing_file_is_fatal_for_edit_and_analyze(craft, tmp_path):
    with pytest.raises(FileNotFoundError):
        craft.edit(tmp_path / "missing.php", [])
    with pytest.raises(FileNotFoundError):
        craft.analyze(tmp_path / "missing.ts")


def test_supports_and_help(craft):
    assert craft.supports(".py")
    assert not craft.supports("rb")
    assert "php" in craft.supported_extensions()
    info = craft.get_help("json")
    assert info["name"] == "json"
    assert info["version"] == "1.0.0"
    assert info["extensions"] == ["json", "jsonc"]
    assert info["capabilities"]["supports_jsonc"]
    assert "set" in info["modifications"]
    with pytest.raises(KeyError):
        craft.get_help("rb")


def test_default_uses_settings():
    craft = CodeCraft.default(Settings(indent="  ", php_strict_types=False))
    assert craft.create("A.php", {"methods": [{"name": "run"}]}) == (
        "<?php\n\nclass A\n{\n  public function run()\n  {\n  }\n}\n"
    )


def test_custom_adapter_list():
    craft = CodeCraft([JsonAdapter()])
    assert craft.supported_extensions() == ["json", "jsonc"]
