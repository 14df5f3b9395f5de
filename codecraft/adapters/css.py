import re

from dataclasses import dataclass, field
from pathlib import Path

from codecraft.adapters.base import FileAdapter, require
from codecraft.adapters.utils import indent_block

CSS_INDENT = "  "

BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.S)
LINE_COMMENT = re.compile(r"^[ \t]*//[^\n]*", re.M)
STRING = re.compile(r"\"(?:\\.|[^\"\\\n])*\"|'(?:\\.|[^'\\\n])*'")
CUSTOM_PROPERTY = re.compile(r"(?<![\w-])(--[\w-]+)\s*:\s*([^;{}]+);")
SCSS_VARIABLE = re.compile(r"^\s*(\$[\w-]+)\s*:\s*([^;]+);", re.M)
IMPORT = re.compile(r"@(?:import|use|forward)\s+(?:url\()?\s*['\"]?([^'\")\s;]+)")

BREAKPOINTS = [
    ("1199px", "Large desktops"),
    ("991px", "Tablets"),
    ("767px", "Mobile phones"),
    ("575px", "Small mobile phones"),
]

RESET_STYLES = """/* Reset Styles */
* {
  margin: 0;
  padding: 0;
  box-sizing: border-box;
}

body {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
  line-height: 1.6;
}

img {
  max-width: 100%;
  height: auto;
}

a {
  text-decoration: none;
  color: inherit;
}

ul, ol {
  list-style: none;
}
"""


@dataclass
class CssBlock:
    header: str
    parents: list[str] = field(default_factory=list)
    # Offsets of the opening and matching closing brace
    open: int = 0
    close: int | None = None


def strip_comments(css: str) -> str:
    """Blank out comments, keeping every other character at its offset."""

    def blank(m: re.Match) -> str:
        return re.sub(r"[^\n]", " ", m.group(0))

    return LINE_COMMENT.sub(blank, BLOCK_COMMENT.sub(blank, css))


def mask_strings(css: str) -> str:
    return STRING.sub(lambda m: m.group(0)[0] + " " * (len(m.group(0)) - 2) + m.group(0)[0], css)


def scan_blocks(css: str) -> list[CssBlock]:
    """Every `{ ... }` block in source order with its header and enclosing headers."""
    text = strip_comments(css)
    masked = mask_strings(text)
    blocks, stack = [], []
    start = 0
    for m in re.finditer(r"[{};]", masked):
        if m.group() == "{":
            block = CssBlock(
                header=" ".join(text[start : m.start()].split()),
                parents=[b.header for b in stack],
                open=m.start(),
            )
            blocks.append(block)
            stack.append(block)
        elif m.group() == "}" and stack:
            stack.pop().close = m.start()
        start = m.end()
    return blocks


def is_balanced(css: str) -> bool:
    """Braces, parentheses and brackets pair up outside strings and comments."""
    pairs = {"}": "{", ")": "(", "]": "["}
    stack = []
    i, n = 0, len(css)
    while i < n:
        ch = css[i]
        if css.startswith("/*", i):
            end = css.find("*/", i + 2)
            if end < 0:
                return False
            i = end + 2
            continue
        if ch in "\"'":
            m = STRING.match(css, i)
            if m is None:
                return False
            i = m.end()
            continue
        if ch in "{([":
            stack.append(ch)
        elif ch in pairs:
            if not stack or stack.pop() != pairs[ch]:
                return False
        i += 1
    return not stack


def declarations(properties: dict | None, indent: str = CSS_INDENT) -> str:
    return "".join(f"{indent}{name}: {value};\n" for name, value in (properties or {}).items())


def rule(selector: str, properties: dict | None, comment: str | None = None) -> str:
    body = declarations(properties)
    if not body and comment:
        body = f"{CSS_INDENT}/* {comment} */\n"
    return f"{selector} {{\n{body}}}\n"


class CssAdapter(FileAdapter):
    name = "css"
    exts = ["css", "scss", "sass"]
    default_type = "stylesheet"
    capabilities = {
        "create_stylesheet": True,
        "create_component_styles": True,
        "create_utilities": True,
        "create_layout": True,
        "add_selector": True,
        "add_variable": True,
        "add_media_query": True,
        "supports_scss": True,
        "supports_sass": True,
        "supports_media_queries": True,
        "supports_keyframes": True,
    }

    def creators(self):
        return {
            "stylesheet": self.create_stylesheet,
            "component": self.create_component,
            "utilities": self.create_utilities,
            "layout": self.create_layout,
        }

    def modifiers(self):
        return {
            "add_selector": self.add_selector,
            "add_variable": self.add_variable,
            "add_media_query": self.add_media_query,
        }

    ### Generation ###

    def selector(self, record: dict) -> str:
        css = f"{require(record, 'selector', 'selector')} {{\n"
        css += declarations(record.get("properties"))
        for nested in record.get("nested") or []:
            css += "\n" + indent_block(self.selector(nested).rstrip("\n"), CSS_INDENT) + "\n"
        return css + "}\n"

    def media_query(self, record: dict) -> str:
        css = f"@media {require(record, 'condition', 'media query')} {{\n"
        css += "\n".join(
            indent_block(self.selector(s).rstrip("\n"), CSS_INDENT) for s in record.get("selectors") or []
        )
        return css + ("\n" if record.get("selectors") else "") + "}\n"

    def create_stylesheet(self, file_path: Path, options: dict) -> str:
        sections = []
        imports = options.get("imports") or []
        if imports:
            sections.append("".join(f"@import '{i}';\n" for i in imports))
        variables = options.get("variables") or {}
        if variables:
            sections.append(
                ":root {\n"
                + declarations({f"--{k.lstrip('-')}": v for k, v in variables.items()})
                + "}\n"
            )
        if options.get("reset"):
            sections.append(RESET_STYLES)
        sections.extend(self.selector(s) for s in options.get("selectors") or [])
        return "\n".join(sections)

    def create_component(self, file_path: Path, options: dict) -> str:
        name = options.get("name") or file_path.stem or "component"
        base = f".{name}"
        sections = [f"/* {name} Component Styles */\n", rule(base, None, "Add base styles here")]
        for element, styles in (options.get("elements") or {}).items():
            sections.append(rule(f"{base}__{element}", styles))
        for state, styles in (options.get("states") or {}).items():
            sections.append(rule(f"{base}--{state}", styles))
        if options.get("responsive"):
            sections.append(
                "@media (max-width: 768px) {\n"
                + indent_block(rule(base, None, "Mobile styles").rstrip("\n"), CSS_INDENT)
                + "\n}\n"
            )
        return "\n".join(sections)

    def create_utilities(self, file_path: Path, options: dict) -> str:
        prefix = options.get("prefix") or ""
        sections = ["/* Utility Classes */\n"]
        for category, rules in (options.get("utilities") or {}).items():
            blocks = [
                rule(f".{prefix}-{name}" if prefix else f".{name}", properties)
                for name, properties in rules.items()
            ]
            sections.append(f"/* {category} utilities */\n" + "\n".join(blocks))
        return "\n".join(sections)

    def create_layout(self, file_path: Path, options: dict) -> str:
        layout = options.get("layout") or "flexbox"
        if layout == "grid":
            body = rule(
                ".grid",
                {
                    "display": "grid",
                    "grid-template-columns": f"repeat({options.get('columns', 12)}, 1fr)",
                    "gap": options.get("gap", "1rem"),
                },
            ) + "\n" + rule(".grid-item", {"grid-column": "span 1"})
        elif layout == "flexbox":
            body = rule(
                ".flex",
                {
                    "display": "flex",
                    "flex-direction": options.get("direction", "row"),
                    "justify-content": options.get("justify", "flex-start"),
                    "align-items": options.get("align", "stretch"),
                },
            ) + "\n" + rule(".flex-item", {"flex": 1})
        else:
            body = "\n".join(
                [
                    rule(".container", {"max-width": "1200px", "margin": "0 auto", "padding": "0 1rem"}),
                    rule(".row", {"display": "flex", "flex-wrap": "wrap"}),
                    rule(".col", {"flex": 1, "padding": "0 0.5rem"}),
                ]
            )
        sections = ["/* Layout Styles */\n", body]
        if options.get("responsive", True):
            sections.append(
                "/* Responsive Breakpoints */\n"
                + "\n".join(
                    f"@media (max-width: {width}) {{\n{CSS_INDENT}/* {label} */\n}}\n"
                    for width, label in BREAKPOINTS
                )
            )
        return "\n".join(sections)

    ### Modification ###

    def add_selector(self, content: str, modification: dict) -> str:
        block = self.selector(require(modification, "selector", "add_selector"))
        return content.rstrip("\n") + "\n\n" + block

    def add_media_query(self, content: str, modification: dict) -> str:
        block = self.media_query(require(modification, "media_query", "add_media_query"))
        return content.rstrip("\n") + "\n\n" + block

    def add_variable(self, content: str, modification: dict) -> str:
        variable = require(modification, "variable", "add_variable")
        name = str(require(variable, "name", "variable")).lstrip("-")
        line = f"{CSS_INDENT}--{name}: {require(variable, 'value', 'variable')};"
        root = next(
            (b for b in scan_blocks(content) if b.header == ":root" and not b.parents),
            None,
        )
        if root is None or root.close is None:
            return f":root {{\n{line}\n}}\n\n" + content
        return content[: root.close].rstrip() + "\n" + line + "\n" + content[root.close :]

    ### Analysis ###

    def analyze_source(self, content: str) -> dict:
        blocks = scan_blocks(content)
        text = strip_comments(content)
        selectors, media, keyframes = [], [], []
        for block in blocks:
            if any(p.startswith("@keyframes") for p in block.parents):
                continue
            if block.header.startswith("@media"):
                media.append(block.header[len("@media") :].strip())
            elif block.header.startswith("@keyframes"):
                keyframes.append(block.header[len("@keyframes") :].strip())
            elif not block.header.startswith("@"):
                selectors.append(block.header)
        return {
            "type": "css",
            "selectors": selectors,
            "variables": {k: v.strip() for k, v in CUSTOM_PROPERTY.findall(text)},
            "scss_variables": {k: v.strip() for k, v in SCSS_VARIABLE.findall(text)},
            "imports": IMPORT.findall(text),
            "media_queries": media,
            "keyframes": keyframes,
        }

    def validate(self, content: str) -> bool:
        return is_balanced(content)

    def get_help(self) -> dict:
        return {
            "description": "CSS/SCSS adapter for stylesheets, BEM components, utilities and layouts",
            "types": list(self.creators()),
            "modifications": list(self.modifiers()),
            "options": {
                "selectors": "List of {selector, properties, nested}",
                "variables": "Mapping of custom property name to value",
                "imports": "List of stylesheet paths to @import",
                "reset": "Prepend reset styles",
                "elements": "Component elements as {element: {property: value}}",
                "states": "Component modifiers as {state: {property: value}}",
                "responsive": "Add responsive rules",
                "utilities": "Utility classes as {category: {name: {property: value}}}",
                "prefix": "Utility class prefix",
                "layout": "grid, flexbox or basic",
            },
            "examples": [
                {
                    "path": "button.scss",
                    "options": {
                        "type": "component",
                        "name": "button",
                        "elements": {"icon": {"margin-right": "0.5rem"}},
                        "states": {"primary": {"background": "var(--primary)"}},
                    },
                },
                {
                    "modifications": [
                        {"type": "add_variable", "variable": {"name": "primary", "value": "#3490dc"}}
                    ]
                },
            ],
        }
