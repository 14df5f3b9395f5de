import pytest
import warnings

from codecraft.adapters.php.builder import (
    build_class,
    build_file,
    build_method,
    build_param,
    build_property,
    parse_snippet,
)
from codecraft.adapters.php.nodes import ClassMethod, Namespace, Property
from codecraft.adapters.php.printer import PhpPrinter
from codecraft.constants import Modifier
from codecraft.exceptions import SnippetParseWarning


def test_param_without_default_key_is_required():
    param = build_param({"name": "x", "type": "string"})
    assert not param.has_default
    assert PhpPrinter().param(param) == "string $x"


def test_param_with_null_default_is_optional():
    param = build_param({"name": "x", "type": "string", "default": None})
    assert param.has_default
    assert param.default is None
    assert PhpPrinter().param(param) == "string $x = null"


def test_param_with_empty_string_default():
    param = build_param({"name": "$x", "default": ""})
    assert param.name == "x"
    assert PhpPrinter().param(param) == "$x = ''"


def test_param_requires_name():
    with pytest.raises(ValueError, match="requires 'name'"):
        build_param({"type": "int"})


@pytest.mark.parametrize(
    "visibility,flag",
    [
        (None, Modifier.PUBLIC),
        ("public", Modifier.PUBLIC),
        ("Protected", Modifier.PROTECTED),
        ("private", Modifier.PRIVATE),
    ],
)
def test_method_visibility(visibility, flag):
    record = {"name": "run"}
    if visibility is not None:
        record["visibility"] = visibility
    assert build_method(record).flags == flag


def test_unknown_visibility_is_an_error():
    with pytest.raises(ValueError, match="Unknown visibility"):
        build_method({"name": "run", "visibility": "internal"})
    with pytest.raises(ValueError, match="Unknown visibility"):
        build_property({"name": "x", "visibility": "package"})


def test_method_modifiers_and_return_type_aliases():
    method = build_method({"name": "make", "static": True, "returnType": "self"})
    assert method.flags == Modifier.PUBLIC | Modifier.STATIC
    assert method.return_type == "self"
    assert build_method({"name": "m", "return_type": "int"}).return_type == "int"


def test_abstract_method_has_no_body():
    method = build_method({"name": "handle", "abstract": True, "body": "return 1;"})
    assert method.body is None
    assert PhpPrinter().method(method) == "abstract public function handle();"


def test_parse_snippet_statements():
    block = parse_snippet("$a = 1;\nreturn $a;")
    assert block.statements == ["$a = 1;", "return $a;"]
    assert not block.is_placeholder


def test_parse_snippet_keeps_nested_layout():
    block = parse_snippet(
        """
        if ($a) {
            return 1;
        }
        return 0;
        """
    )
    assert block.statements == ["if ($a) {\n    return 1;\n}", "return 0;"]


def test_parse_snippet_leaves_literal_lines_alone():
    block = parse_snippet("    $a = 1;\n    return 'line1\n  line2';")
    assert block.statements == ["$a = 1;", "return 'line1\n  line2';"]
    nowdoc = parse_snippet("        $t = <<<'EOT'\n    raw\n    EOT;")
    assert nowdoc.statements == ["$t = <<<'EOT'\n    raw\n    EOT;"]


def test_parse_snippet_empty():
    assert parse_snippet(None).statements == []
    assert parse_snippet("   ").statements == []


def test_parse_snippet_failure_is_a_warning():
    with pytest.warns(SnippetParseWarning, match="substituted a no-op placeholder"):
        block = parse_snippet("$x = ;")
    assert block.statements == ["null;"]
    assert block.is_placeholder
    assert "line" in block.warning


def test_method_carries_snippet_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", SnippetParseWarning)
        method = build_method({"name": "broken", "body": "if ($a {"})
    assert method.body.statements == ["null;"]
    assert method.warnings == [method.body.warning]


def test_property_default_rule():
    assert not build_property({"name": "a"}).has_default
    prop = build_property({"name": "b", "default": None, "readonly": True, "type": "?int"})
    assert prop.has_default
    assert prop.flags == Modifier.PUBLIC | Modifier.READONLY


def test_build_class_members_in_order():
    decl = build_class(
        {
            "name": "User",
            "extends": "Model",
            "implements": ["HasName"],
            "abstract": True,
            "constants": {"TABLE": "users"},
            "properties": [{"name": "name"}],
            "methods": [{"name": "getName"}],
        }
    )
    assert decl.flags == Modifier.ABSTRACT
    assert decl.extends == ["Model"]
    assert decl.implements == ["HasName"]
    assert [type(m).__name__ for m in decl.members] == [
        "ClassConst",
        "Property",
        "ClassMethod",
    ]


def test_build_class_single_parent():
    with pytest.raises(ValueError, match="only extend one parent"):
        build_class({"name": "A", "extends": ["B", "C"]})


def test_build_interface():
    decl = build_class(
        {"name": "Repo", "extends": ["Countable", "Traversable"], "methods": [{"name": "find"}]},
        kind="interface",
    )
    assert decl.extends == ["Countable", "Traversable"]
    assert isinstance(decl.members[0], ClassMethod)
    assert decl.members[0].body is None
    with pytest.raises(ValueError, match="cannot declare properties"):
        build_class({"name": "Repo", "properties": [{"name": "x"}]}, kind="interface")


def test_build_trait():
    decl = build_class({"name": "Greets", "properties": [{"name": "greeting"}]}, kind="trait")
    assert decl.kind == "trait"
    assert isinstance(decl.members[0], Property)


def test_build_file_namespace_wrapping():
    nodes = build_file({"name": "User", "namespace": "\\App\\Models"})
    assert len(nodes) == 1
    assert isinstance(nodes[0], Namespace)
    assert nodes[0].name == "App\\Models"
    assert nodes[0].statements[0].name == "User"
    assert build_file({"name": "User"})[0].name == "User"
