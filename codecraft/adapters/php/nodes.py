"""
Synthesized PHP tree fragments.

These records are produced by the builder from caller descriptors and rendered by the
printer. Parsed source is never converted into them; parsed trees stay tree-sitter trees.
"""

from dataclasses import dataclass, field
from typing import Any

from codecraft.constants import Modifier


@dataclass
class Param:
    name: str
    type: str | None = None
    # `default` is only meaningful when `has_default` is set; a default of None is `null`
    has_default: bool = False
    default: Any = None
    variadic: bool = False
    by_ref: bool = False


@dataclass
class Block:
    """A statement list spliced in from a parsed snippet."""

    statements: list[str] = field(default_factory=list)
    warning: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.warning is not None


@dataclass
class ClassMethod:
    name: str
    flags: Modifier = Modifier.PUBLIC
    return_type: str | None = None
    params: list[Param] = field(default_factory=list)
    # None means the method has no body at all (abstract / interface signature)
    body: Block | None = field(default_factory=Block)

    @property
    def warnings(self) -> list[str]:
        if self.body is not None and self.body.warning:
            return [self.body.warning]
        return []


@dataclass
class Property:
    name: str
    flags: Modifier = Modifier.PUBLIC
    type: str | None = None
    has_default: bool = False
    default: Any = None


@dataclass
class ClassConst:
    name: str
    value: Any
    flags: Modifier = Modifier.PUBLIC


@dataclass
class ClassLike:
    """A class, interface or trait declaration."""

    kind: str
    name: str
    flags: Modifier = Modifier.NONE
    extends: list[str] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)
    members: list[ClassConst | Property | ClassMethod] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [w for m in self.members if isinstance(m, ClassMethod) for w in m.warnings]


@dataclass
class Namespace:
    name: str
    statements: list[ClassLike] = field(default_factory=list)
