import pytest

from codecraft.adapters.css import CssAdapter, is_balanced, scan_blocks


@pytest.fixture
def adapter():
    return CssAdapter()


def test_create_stylesheet(adapter):
    content = adapter.create(
        "app.scss",
        {
            "imports": ["base.css"],
            "variables": {"primary": "#333"},
            "selectors": [
                {
                    "selector": ".btn",
                    "properties": {"color": "red"},
                    "nested": [{"selector": "&:hover", "properties": {"color": "blue"}}],
                }
            ],
        },
    )
    assert content == (
        "@import 'base.css';\n"
        "\n"
        ":root {\n  --primary: #333;\n}\n"
        "\n"
        ".btn {\n  color: red;\n\n  &:hover {\n    color: blue;\n  }\n}\n"
    )
    assert adapter.validate(content)


def test_create_stylesheet_with_reset(adapter):
    content = adapter.create("reset.css", {"reset": True})
    assert content.startswith("/* Reset Styles */\n* {\n  margin: 0;")
    assert "ul, ol" in adapter.analyze_source(content)["selectors"]


def test_create_component(adapter):
    content = adapter.create(
        "button.css",
        {
            "type": "component",
            "name": "button",
            "elements": {"icon": {"margin-right": "0.5rem"}},
            "states": {"primary": {"background": "blue"}},
            "responsive": True,
        },
    )
    assert ".button__icon {\n  margin-right: 0.5rem;\n}\n" in content
    assert ".button--primary {\n  background: blue;\n}\n" in content
    assert "@media (max-width: 768px) {\n  .button {\n    /* Mobile styles */\n  }\n}\n" in content
    report = adapter.analyze_source(content)
    assert report["selectors"] == [".button", ".button__icon", ".button--primary", ".button"]
    assert report["media_queries"] == ["(max-width: 768px)"]


def test_create_component_name_from_file(adapter):
    content = adapter.create("card.css", {"type": "component"})
    assert content.startswith("/* card Component Styles */\n")


def test_create_utilities(adapter):
    content = adapter.create(
        "utils.css",
        {"type": "utilities", "prefix": "u", "utilities": {"spacing": {"m-0": {"margin": 0}}}},
    )
    assert content == "/* Utility Classes */\n\n/* spacing utilities */\n.u-m-0 {\n  margin: 0;\n}\n"


def test_create_layout(adapter):
    grid = adapter.create("layout.css", {"type": "layout", "layout": "grid", "columns": 3})
    assert "grid-template-columns: repeat(3, 1fr);" in grid
    assert len(adapter.analyze_source(grid)["media_queries"]) == 4
    flex = adapter.create("layout.css", {"type": "layout", "responsive": False})
    assert ".flex {\n  display: flex;" in flex
    assert "@media" not in flex
    basic = adapter.create("layout.css", {"type": "layout", "layout": "basic"})
    assert adapter.analyze_source(basic)["selectors"][:3] == [".container", ".row", ".col"]


def test_add_selector_and_media_query(adapter):
    result = adapter.edit_source(
        "a {}\n",
        [
            {"type": "add_selector", "selector": {"selector": ".b", "properties": {"color": "red"}}},
            {
                "type": "add_media_query",
                "media_query": {
                    "condition": "(min-width: 1024px)",
                    "selectors": [{"selector": ".grid", "properties": {"gap": "2rem"}}],
                },
            },
        ],
    )
    assert result == (
        "a {}\n\n.b {\n  color: red;\n}\n\n"
        "@media (min-width: 1024px) {\n  .grid {\n    gap: 2rem;\n  }\n}\n"
    )


def test_add_variable_to_existing_root(adapter, test_file_css):
    result = adapter.edit(
        test_file_css, [{"type": "add_variable", "variable": {"name": "--accent", "value": "#f66"}}]
    )
    assert "  --spacing: 1rem;\n  --accent: #f66;\n}" in result
    assert result.count(":root") == 1
    assert adapter.analyze_source(result)["variables"]["--accent"] == "#f66"


def test_add_variable_creates_root(adapter):
    result = adapter.edit_source(
        "a { color: red; }\n", [{"type": "add_variable", "variable": {"name": "x", "value": "1"}}]
    )
    assert result == ":root {\n  --x: 1;\n}\n\na { color: red; }\n"


def test_edit_requires_keys(adapter):
    with pytest.raises(ValueError, match="add_variable requires 'variable'"):
        adapter.edit_source("", [{"type": "add_variable"}])
    with pytest.raises(ValueError, match="Unknown modification type"):
        adapter.edit_source("", [{"type": "add_keyframes"}])


def test_analyze(adapter, test_file_css):
    report = adapter.analyze(test_file_css)
    assert report["type"] == "css"
    assert report["selectors"] == [":root", ".button, .button--primary", ".card .title", ".card"]
    assert report["variables"] == {"--primary": "#3490dc", "--spacing": "1rem"}
    assert report["imports"] == ["reset.css", "fonts.css"]
    assert report["media_queries"] == ["(max-width: 768px)"]
    assert report["keyframes"] == ["fade"]


def test_analyze_scss_variables(adapter):
    report = adapter.analyze_source("$primary: red;\n.a { color: $primary; }\n")
    assert report["scss_variables"] == {"$primary": "red"}


def test_scan_blocks_ignores_strings_and_comments():
    blocks = scan_blocks('/* { */ .a { content: "}"; }\n.b {}\n')
    assert [b.header for b in blocks] == [".a", ".b"]
    assert all(b.close is not None for b in blocks)


@pytest.mark.parametrize(
    "source,expected",
    [
        (".a { color: red; }", True),
        (".a { content: '}'; }", True),
        ("/* } */ .a {}", True),
        (".a { color: red;\n", False),
        (".a { } }", False),
        (".a { width: calc(100% - 2px; }", False),
        ("/* unterminated", False),
    ],
)
def test_is_balanced(source, expected):
    assert is_balanced(source) is expected


def test_validate(adapter, test_file_css):
    assert adapter.validate(test_file_css.read_text())
    assert adapter.validate(".a {\n  color: red;\n") is False
