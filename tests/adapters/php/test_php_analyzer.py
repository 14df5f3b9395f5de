import pytest

from codecraft.adapters.php.analyzer import analyze_tree
from codecraft.adapters.php.editor import PhpDocument


@pytest.fixture
def report(test_file_php):
    return analyze_tree(PhpDocument.parse(test_file_php.read_text()).root)


def test_namespace(report):
    assert report.namespace == "App\\Models"


def test_only_first_namespace_reported():
    source = "<?php\nnamespace First;\nclass A {}\nnamespace Second;\nclass B {}\n"
    report = analyze_tree(PhpDocument.parse(source).root)
    assert report.namespace == "First"
    assert [c.name for c in report.classes] == ["A", "B"]


def test_class(report):
    assert len(report.classes) == 1
    user = report.classes[0]
    assert user.name == "User"
    assert user.extends == "Model"
    assert len(user.implements) == 2
    assert user.implements[0] == "HasName"
    assert not user.abstract
    assert not user.final


def test_class_methods(report):
    methods = {m.name: m for m in report.classes[0].methods}
    assert list(methods) == ["__construct", "getName", "table", "jsonSerialize"]
    assert methods["getName"].visibility == "public"
    assert methods["getName"].return_type == "string"
    assert methods["table"].visibility == "protected"
    assert methods["table"].static
    assert methods["jsonSerialize"].final
    assert methods["__construct"].return_type is None


def test_method_params(report):
    construct = report.classes[0].methods[0]
    name, email = construct.params
    assert (name.name, name.type, name.has_default, name.default) == ("name", "string", False, None)
    assert (email.name, email.type, email.has_default, email.default) == (
        "email",
        "?string",
        True,
        "null",
    )


def test_class_properties(report):
    properties = report.classes[0].properties
    assert [p.name for p in properties] == ["name", "email", "count", "limit"]
    name, email, count, limit = properties
    assert (name.visibility, name.type, name.default) == ("protected", "string", None)
    assert (email.visibility, email.type, email.default) == ("private", "?string", "null")
    assert count.static and limit.static
    assert (count.type, count.default) == ("int", "0")
    assert (limit.type, limit.default) == ("int", "10")


def test_class_constants(report):
    constants = report.classes[0].constants
    assert len(constants) == 1
    assert constants[0].name == "TABLE"
    assert constants[0].value == "'users'"


def test_interface(report):
    assert len(report.interfaces) == 1
    named = report.interfaces[0]
    assert named.name == "Named"
    assert "HasName" in named.extends
    assert [m.name for m in named.methods] == ["getName"]
    assert named.methods[0].return_type == "string"


def test_trait(report):
    greets = report.traits[0]
    assert greets.name == "Greets"
    assert [m.name for m in greets.methods] == ["greet"]
    assert [p.name for p in greets.properties] == ["greeting"]
    assert greets.properties[0].default == "'Hello'"


def test_functions(report):
    assert len(report.functions) == 1
    make_user = report.functions[0]
    assert make_user.name == "make_user"
    assert make_user.return_type == "User"
    assert [p.name for p in make_user.params] == ["name", "extra"]


def test_visibility_precedence():
    source = "<?php\nabstract class A\n{\n    abstract protected function run(): void;\n    var $legacy;\n}\n"
    report = analyze_tree(PhpDocument.parse(source).root)
    cls = report.classes[0]
    assert cls.abstract
    assert cls.methods[0].visibility == "protected"
    assert cls.methods[0].abstract
    assert cls.properties[0].visibility == "public"


def test_to_dict(report):
    data = report.to_dict()
    assert data["type"] == "php"
    assert set(data) == {"type", "namespace", "classes", "interfaces", "traits", "functions"}
    assert data["classes"][0]["methods"][1]["name"] == "getName"
    assert data["classes"][0]["methods"][0]["params"][1]["default"] == "null"


def test_analysis_does_not_mutate(test_file_php):
    document = PhpDocument.parse(test_file_php.read_text())
    before = document.text
    assert analyze_tree(document.root) == analyze_tree(document.root)
    assert document.text == before
