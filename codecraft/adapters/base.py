"""
Base file adapter class.

A file adapter owns one language: it generates new file content from declarative
options, applies ordered modifications to existing files, reports structural facts
about a file and checks that content parses. Adapters hold no state between calls.
"""

import logging

from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from codecraft.adapters.utils import normalize_ext, read_source
from codecraft.constants import DEFAULT_ADAPTER_VERSION

logger = logging.getLogger(__name__)


class FileAdapter(ABC):
    """Abstract base class for language adapters."""

    # To be defined in subclasses
    name: str
    exts: list[str] = []
    capabilities: dict[str, bool] = {}
    default_type: str | None = None

    version: str = DEFAULT_ADAPTER_VERSION

    def supports(self, ext: str) -> bool:
        return normalize_ext(ext) in self.exts

    ### START: Methods that *do not* require (re-)implementation ###

    def create(self, file_path: str | Path, options: dict | None = None) -> str:
        """Generate file content; `options["type"]` picks the kind of file."""
        options = dict(options or {})
        kind = options.get("type") or self.default_type
        creators = self.creators()
        if kind not in creators:
            raise ValueError(
                f"Unknown {self.name} type: {kind}. Must be one of {sorted(creators)}"
            )
        logger.debug(f"[{self.name}] create {kind} for {file_path}")
        return creators[kind](Path(file_path), options)

    def edit(self, file_path: str | Path, modifications: list[dict]) -> str:
        """Apply `modifications` in order to the file's content and return the result."""
        return self.edit_source(read_source(file_path), modifications)

    def edit_source(self, content: str, modifications: list[dict]) -> str:
        for modification in modifications:
            content = self.apply_modification(content, modification)
        return content

    def apply_modification(self, content: str, modification: dict) -> str:
        kind = modification.get("type")
        handlers = self.modifiers()
        if kind not in handlers:
            raise ValueError(f"Unknown modification type: {kind}")
        logger.debug(f"[{self.name}] apply {kind}")
        return handlers[kind](content, modification)

    def analyze(self, file_path: str | Path) -> dict:
        return self.analyze_source(read_source(file_path))

    ### END: Methods that *do not* require (re-)implementation ###

    ### START: Methods that require implementation ###

    @abstractmethod
    def creators(self) -> dict[str, Callable[[Path, dict], str]]:
        """Map each supported `type` option to a function of (file path, options)."""
        pass

    @abstractmethod
    def modifiers(self) -> dict[str, Callable[[str, dict], str]]:
        """
        Map each supported modification `type` to a function of (content, modification).

        Adapters that override `edit_source` to apply a whole list against one parsed
        document (PHP, JSON) map every kind to a one-item `edit_source` call, so
        `apply_modification` and `edit` share a single code path there.
        """
        pass

    @abstractmethod
    def analyze_source(self, content: str) -> dict:
        pass

    @abstractmethod
    def validate(self, content: str) -> bool:
        pass

    @abstractmethod
    def get_help(self) -> dict:
        pass

    ### END: Methods that require implementation ###


def require(options: dict, key: str, what: str):
    """Fetch a mandatory option, failing with an input error when it is absent."""
    if options.get(key) in (None, ""):
        raise ValueError(f"{what} requires '{key}'")
    return options[key]
