"""
Purpose: Command line front end for CodeCraft.

Usage: codecraft generate app/Models/User.php -o namespace=App\\Models -o extends=Model
       codecraft edit src/User.php '[{"type": "add_method", "method": {"name": "save"}}]' --write
       codecraft analyze src/User.php
       codecraft validate src/User.php
       codecraft help php
"""

import argparse
import json
import logging
import re
import sys

from pathlib import Path
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from codecraft.adapters.utils import ext_of, normalize_ext
from codecraft.config import Settings, load_settings
from codecraft.constants import FALSY_STRINGS, TRUTHY_STRINGS
from codecraft.craft import CodeCraft
from codecraft.exceptions import EditError

logger = logging.getLogger(__name__)

console = Console()

# Conventional locations that imply generation options
PATH_PRESETS = [
    (r"app/Models/([^/]+)\.php$", {"namespace": "App\\Models", "extends": "Model"}),
    (
        r"app/Http/Controllers/([^/]+Controller)\.php$",
        {"namespace": "App\\Http\\Controllers", "extends": "Controller"},
    ),
    (r"tests/Unit/([^/]+Test)\.php$", {"namespace": "Tests\\Unit", "extends": "TestCase"}),
    (r"tests/([^/]+Test)\.php$", {"namespace": "Tests\\Feature", "extends": "TestCase"}),
    (r"src/components/([^/]+)\.jsx$", {"type": "component", "functional": True}),
]


def parse_value(raw: str):
    """Interpret the value half of a `key=value` option."""
    value = raw.strip()
    if (value.startswith("{") and value.endswith("}")) or (
        value.startswith("[") and value.endswith("]")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass
    if value.lower() in TRUTHY_STRINGS:
        return True
    if value.lower() in FALSY_STRINGS:
        return False
    if re.fullmatch(r"[+-]?\d+", value):
        return int(value)
    if re.fullmatch(r"[+-]?(\d+\.\d*|\.\d+)([eE][+-]?\d+)?", value):
        return float(value)
    if "," in value:
        return [part.strip() for part in value.split(",")]
    return value


def options_from_path(file_path: str) -> dict:
    options = {"name": Path(file_path).stem}
    posix = Path(file_path).as_posix()
    for pattern, preset in PATH_PRESETS:
        m = re.search(pattern, posix)
        if m:
            options.update(preset, name=m.group(1))
            break
    return options


def build_options(file_path: str, pairs: list[str], settings: Settings) -> dict:
    """Path-derived options, then YAML defaults for the extension, then `key=value` pairs."""
    options = options_from_path(file_path)
    options.update(settings.defaults_for(ext_of(file_path)))
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Option must look like key=value: {pair}")
        key, value = pair.split("=", 1)
        options[key.strip()] = parse_value(value)
    return options


def format_bytes(size: float) -> str:
    units = ["B", "KB", "MB", "GB"]
    i = 0
    while size >= 1024 and i < len(units) - 1:
        size /= 1024
        i += 1
    return f"{round(size, 2)} {units[i]}"


def print_unsupported(craft: CodeCraft, ext: str):
    print(f"[red]Unsupported file extension: {escape(ext or '(none)')}[/red]")
    print(f"Supported extensions: {', '.join(craft.supported_extensions())}")


def print_code(content: str):
    console.print(content, markup=False, highlight=False, soft_wrap=True)


def file_summary(path: Path, options: dict) -> Table:
    content = path.read_text(encoding="utf8")
    table = Table("Property", "Value")
    table.add_row("File Path", str(path))
    table.add_row("Extension", ext_of(path))
    table.add_row("File Size", format_bytes(len(content.encode("utf8"))))
    table.add_row("Lines", str(content.count("\n")))
    table.add_row("Name", escape(str(options.get("name", "unknown"))))
    table.add_row("Namespace", escape(str(options.get("namespace", "N/A"))))
    return table


def generate(craft: CodeCraft, settings: Settings, path: str, options: list[str], force: bool, dry_run: bool) -> int:
    ext = ext_of(path)
    if not craft.supports(ext):
        print_unsupported(craft, ext)
        return 1
    try:
        opts = build_options(path, options, settings)
        if Path(path).exists() and not (force or dry_run):
            print(f"[red]File already exists: {escape(path)}[/red] (use --force to overwrite)")
            return 1
        if dry_run:
            content = craft.create(path, opts)
            lines = content.count("\n")
            print(f"Generated content preview for {escape(path)}:")
            print_code("-" * 50 + "\n" + content + "\n" + "-" * 50)
            print(f"Lines: {lines}, Characters: {len(content)}")
            return 0
        if not craft.write(path, opts):
            print(f"[red]Failed to write file: {escape(path)}[/red]")
            return 1
    except ValueError as e:
        print(f"[red]Error generating file: {escape(str(e))}[/red]")
        return 1
    print(f"[green]File generated successfully: {escape(path)}[/green]")
    print(file_summary(Path(path), opts))
    return 0


def load_modifications(raw: str) -> list[dict]:
    source = Path(raw)
    text = source.read_text(encoding="utf8") if source.suffix == ".json" and source.is_file() else raw
    modifications = json.loads(text)
    if isinstance(modifications, dict):
        modifications = [modifications]
    if not isinstance(modifications, list) or not all(isinstance(m, dict) for m in modifications):
        raise ValueError("Modifications must be a JSON object or a list of objects")
    return modifications


def edit(craft: CodeCraft, path: str, modifications: str, write: bool) -> int:
    ext = ext_of(path)
    if not craft.supports(ext):
        print_unsupported(craft, ext)
        return 1
    try:
        mods = load_modifications(modifications)
        content = craft.edit(path, mods)
    except (ValueError, EditError, FileNotFoundError) as e:
        print(f"[red]Edit failed: {escape(str(e))}[/red]")
        return 1
    if not write:
        print_code(content)
        return 0
    if not craft.edit_file(path, mods):
        print(f"[red]Failed to write file: {escape(path)}[/red]")
        return 1
    print(f"[green]Applied {len(mods)} modification(s) to {escape(path)}[/green]")
    return 0


def analyze(craft: CodeCraft, path: str) -> int:
    ext = ext_of(path)
    if not craft.supports(ext):
        print_unsupported(craft, ext)
        return 1
    try:
        report = craft.analyze(path)
    except (ValueError, FileNotFoundError) as e:
        print(f"[red]Analysis failed: {escape(str(e))}[/red]")
        return 1
    print_code(json.dumps(report, indent=2))
    return 0


def validate(craft: CodeCraft, path: str) -> int:
    ext = ext_of(path)
    if not craft.supports(ext):
        print_unsupported(craft, ext)
        return 1
    if craft.validate(path):
        print(f"[green]Valid:[/green] {escape(path)}")
        return 0
    print(f"[red]Invalid:[/red] {escape(path)}")
    return 1


def show_help(craft: CodeCraft, ext: str) -> int:
    ext = normalize_ext(ext)
    if not craft.supports(ext):
        print(f"[red]No help available for extension: {escape(ext)}[/red]")
        print(f"Available extensions: {', '.join(craft.supported_extensions())}")
        return 1
    info = craft.get_help(ext)
    print(f"[bold]CodeCraft - .{ext} files[/bold] ({info['name']} adapter v{info['version']})")
    print(escape(info.get("description", "No description available")))
    print(f"Types: {', '.join(info.get('types', []))}")
    print(f"Modifications: {', '.join(info.get('modifications', []))}")
    options = info.get("options") or {}
    if options:
        table = Table("Option", "Description")
        for key, description in options.items():
            table.add_row(key, escape(str(description)))
        print(table)
    for example in info.get("examples") or []:
        print_code(json.dumps(example, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="codecraft",
        description="Generate, edit, analyze and validate source files by extension.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with per-extension generation defaults.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate a new file.")
    generate_parser.add_argument("path", type=str, help="File to generate (e.g., app/Models/User.php).")
    generate_parser.add_argument(
        "-o",
        "--option",
        dest="options",
        action="append",
        default=[],
        help="Generation option as key=value; may be repeated.",
    )
    generate_parser.add_argument("--force", action="store_true", help="Overwrite existing files.")
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be generated without creating files.",
    )

    edit_parser = subparsers.add_parser("edit", help="Apply modifications to a file.")
    edit_parser.add_argument("path", type=str, help="File to edit.")
    edit_parser.add_argument(
        "modifications",
        type=str,
        help="JSON list of modifications, or a path to a .json file holding one.",
    )
    edit_parser.add_argument("-w", "--write", action="store_true", help="Write the result back to the file.")

    analyze_parser = subparsers.add_parser("analyze", help="Print a structural report as JSON.")
    analyze_parser.add_argument("path", type=str, help="File to analyze.")

    validate_parser = subparsers.add_parser("validate", help="Exit 0 if the file parses, 1 otherwise.")
    validate_parser.add_argument("path", type=str, help="File to validate.")

    help_parser = subparsers.add_parser("help", help="Show help for the adapter of an extension.")
    help_parser.add_argument("ext", type=str, help="File extension, e.g. php.")

    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    craft = CodeCraft.default(settings)

    if args.command == "generate":
        return generate(craft, settings, args.path, args.options, args.force, args.dry_run)
    if args.command == "edit":
        return edit(craft, args.path, args.modifications, args.write)
    if args.command == "analyze":
        return analyze(craft, args.path)
    if args.command == "validate":
        return validate(craft, args.path)
    return show_help(craft, args.ext)


if __name__ == "__main__":
    sys.exit(main())
