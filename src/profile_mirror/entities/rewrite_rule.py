"""Rewrite rule domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RewriteRule:
    """A literal find/replace pair applied to textual bodies.

    Rules are applied in a fixed sequence with ``str.replace``; later
    rules see the output of earlier ones.

    Attributes:
        match: Literal text to find (never a pattern)
        replacement: Text substituted for every occurrence
    """

    match: str
    replacement: str

    def __post_init__(self) -> None:
        if not self.match:
            raise ValueError("RewriteRule.match must not be empty")

    def apply(self, text: str) -> str:
        return text.replace(self.match, self.replacement)
