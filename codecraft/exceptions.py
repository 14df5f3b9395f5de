class ParseError(ValueError):
    """Source text could not be parsed without syntax errors."""

    def __init__(self, message: str, positions: list[tuple[int, int]] | None = None):
        self.positions = positions or []
        if self.positions:
            where = ", ".join(f"{row + 1}:{col + 1}" for row, col in self.positions[:5])
            message = f"{message} (syntax errors at {where})"
        super().__init__(message)


class EditError(RuntimeError):
    """An edit operation could not be applied to the parsed source."""


class SnippetParseWarning(UserWarning):
    """A code snippet failed to parse and was replaced by a placeholder statement."""
