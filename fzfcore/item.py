"""An input line as held by the finder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from fzfcore.ansi import AnsiOffset, extract_color


@dataclass
class Item:
    """Displayed text of an input line, its ordinal, original text and colours."""

    text: str
    index: int = -1
    orig_text: Optional[Union[bytes, str]] = None
    colors: list[AnsiOffset] = field(default_factory=list)

    def as_string(self, strip_ansi: bool) -> str:
        """Return the original line, without escape sequences if ``strip_ansi``."""
        if self.orig_text is None:
            return self.text
        orig = self.orig_text
        if isinstance(orig, bytes):
            orig = orig.decode("utf-8", errors="surrogateescape")
        if strip_ansi:
            trimmed, _, _ = extract_color(orig, None, None)
            return trimmed
        return orig