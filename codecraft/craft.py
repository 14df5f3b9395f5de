"""
Purpose: Single entry point that routes create/edit/analyze/validate calls to the
adapter registered for a file's extension.

Usage:

    from codecraft import CodeCraft

    craft = CodeCraft.default()
    craft.write("src/Models/User.php", {"namespace": "App\\Models"})
    craft.edit_file("src/Models/User.php", [{"type": "add_method", "method": {"name": "save"}}])
"""

import logging

from collections.abc import Iterable
from pathlib import Path

from codecraft.adapters import FileAdapter, default_adapters
from codecraft.adapters.utils import ext_of
from codecraft.config import Settings, load_settings
from codecraft.registry import AdapterRegistry

logger = logging.getLogger(__name__)


class CodeCraft:
    def __init__(self, adapters: Iterable[FileAdapter]):
        self.registry = AdapterRegistry(adapters)

    @classmethod
    def default(cls, settings: Settings | None = None) -> "CodeCraft":
        settings = settings or load_settings()
        return cls(default_adapters(settings.indent, settings.php_strict_types))

    def adapter_for(self, file_path: str | Path) -> FileAdapter:
        adapter = self.registry.get_by_file(file_path)
        logger.debug(f"Using {adapter.name} adapter for {file_path}")
        return adapter

    def create(self, file_path: str | Path, options: dict | None = None) -> str:
        return self.adapter_for(file_path).create(file_path, options)

    def write(self, file_path: str | Path, options: dict | None = None) -> bool:
        """Generate content and write it to `file_path`, creating parent directories."""
        return self._write(file_path, self.create(file_path, options))

    def edit(self, file_path: str | Path, modifications: list[dict]) -> str:
        return self.adapter_for(file_path).edit(file_path, modifications)

    def edit_file(self, file_path: str | Path, modifications: list[dict]) -> bool:
        return self._write(file_path, self.edit(file_path, modifications))

    def analyze(self, file_path: str | Path) -> dict:
        return self.adapter_for(file_path).analyze(file_path)

    def validate(self, file_path: str | Path) -> bool:
        adapter = self.adapter_for(file_path)
        path = Path(file_path)
        if not path.is_file():
            logger.info(f"Cannot validate missing file {file_path}")
            return False
        return adapter.validate(path.read_text(encoding="utf8"))

    def supports(self, ext: str) -> bool:
        return self.registry.supports(ext)

    def supported_extensions(self) -> list[str]:
        return self.registry.extensions()

    def get_help(self, ext: str) -> dict:
        adapter = self.registry.get_adapter(ext)
        return {
            "name": adapter.name,
            "version": adapter.version,
            "extensions": list(adapter.exts),
            "capabilities": dict(adapter.capabilities),
            **adapter.get_help(),
        }

    def _write(self, file_path: str | Path, content: str) -> bool:
        path = Path(file_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf8")
        except OSError as e:
            logger.error(f"Failed to write {file_path}: {e}")
            return False
        logger.info(f"Wrote {ext_of(path) or 'file'} content to {file_path}")
        return True
