"""
Purpose: Repo-wide constants
"""

from enum import Enum, IntFlag

DEFAULT_ADAPTER_VERSION = "1.0.0"
DEFAULT_CONFIG_FILE = "codecraft.yaml"
DEFAULT_INDENT = "    "
ENV_CONFIG = "CODECRAFT_CONFIG"
ENV_INDENT = "CODECRAFT_INDENT"
ENV_LOG_LEVEL = "CODECRAFT_LOG_LEVEL"
ENV_PHP_STRICT_TYPES = "CODECRAFT_PHP_STRICT_TYPES"
PHP_OPEN_TAG = "<?php"
PHP_STRICT_TYPES = "declare(strict_types=1);"
TODO_IMPLEMENT = "TODO: implement"

FALSY_STRINGS = {"0", "false", "no", "off"}
TRUTHY_STRINGS = {"1", "true", "yes", "on"}


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: "str | Visibility | None") -> "Visibility":
        """Map a caller-supplied visibility string onto the closed enumeration."""
        if value is None:
            return cls.PUBLIC
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown visibility '{value}'. Must be one of {[v.value for v in cls]}"
            ) from None


class Modifier(IntFlag):
    """Member/class modifier flags, combined bitwise the way PHP declares them."""

    NONE = 0
    PUBLIC = 1
    PROTECTED = 2
    PRIVATE = 4
    STATIC = 8
    ABSTRACT = 16
    FINAL = 32
    READONLY = 64

    @property
    def visibility(self) -> Visibility:
        # private > protected > public-by-default
        if self & Modifier.PRIVATE:
            return Visibility.PRIVATE
        if self & Modifier.PROTECTED:
            return Visibility.PROTECTED
        return Visibility.PUBLIC


VISIBILITY_FLAGS = {
    Visibility.PUBLIC: Modifier.PUBLIC,
    Visibility.PROTECTED: Modifier.PROTECTED,
    Visibility.PRIVATE: Modifier.PRIVATE,
}

# Keyword order used when printing modifiers
MODIFIER_KEYWORDS = [
    (Modifier.FINAL, "final"),
    (Modifier.ABSTRACT, "abstract"),
    (Modifier.PUBLIC, "public"),
    (Modifier.PROTECTED, "protected"),
    (Modifier.PRIVATE, "private"),
    (Modifier.STATIC, "static"),
    (Modifier.READONLY, "readonly"),
]
