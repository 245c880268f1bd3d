"""Configuration exceptions."""

from typing import Optional, Sequence


class ConfigurationError(Exception):
    """Configuration could not be loaded or failed validation.

    ``errors`` lists the individual problems and ``suggestions`` hints at a
    fix. Both are rendered into the message so the CLI can print it as is.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[Sequence[str]] = None,
        suggestions: Optional[Sequence[str]] = None,
    ):
        self.message = message
        self.errors = list(errors or ())
        self.suggestions = list(suggestions or ())
        super().__init__(self.render())

    def render(self) -> str:
        lines = [self.message]
        lines.extend(f"  * {error}" for error in self.errors)
        if self.suggestions:
            lines.append("Try:")
            lines.extend(f"  - {hint}" for hint in self.suggestions)
        return "\n".join(lines)
