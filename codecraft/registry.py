import logging

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from codecraft.adapters.base import FileAdapter
from codecraft.adapters.utils import ext_of, normalize_ext

logger = logging.getLogger(__name__)


class AdapterRegistry(Mapping):
    """
    Immutable mapping of file extension -> adapter, built once from a list of adapters.

    Two adapters claiming the same extension is a configuration error and is reported
    when the registry is built, not resolved silently.
    """

    def __init__(self, adapters: Iterable[FileAdapter]):
        by_ext = {}
        for adapter in adapters:
            for ext in adapter.exts:
                ext = normalize_ext(ext)
                if ext in by_ext:
                    raise ValueError(
                        f"Extension '{ext}' is claimed by both the "
                        f"'{by_ext[ext].name}' and '{adapter.name}' adapters"
                    )
                by_ext[ext] = adapter
        self._by_ext = MappingProxyType(by_ext)
        logger.debug(f"Registered adapters for {sorted(by_ext)}")

    def __getitem__(self, ext: str) -> FileAdapter:
        return self._by_ext[normalize_ext(ext)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_ext)

    def __len__(self) -> int:
        return len(self._by_ext)

    def __contains__(self, ext) -> bool:
        return isinstance(ext, str) and normalize_ext(ext) in self._by_ext

    def get_adapter(self, ext: str) -> FileAdapter:
        if ext not in self:
            raise KeyError(
                f"No adapter registered for extension '{ext}'. "
                f"Supported: {', '.join(self.extensions())}"
            )
        return self[ext]

    def get_by_file(self, file_path: str | Path) -> FileAdapter:
        return self.get_adapter(ext_of(file_path))

    def supports(self, ext: str) -> bool:
        return ext in self

    def extensions(self) -> list[str]:
        return sorted(self._by_ext)
