"""Reduction of accented Latin letters to their plain ASCII forms."""

from fzfcore.latin_lower import lower_base


def normalize_rune(char: str) -> str:
    """Return the plain letter for an accented Latin letter, or the character unchanged."""
    return lower_base(char)


def normalize_runes(text: str) -> str:
    """Return ``text`` with every accented Latin letter replaced by its plain form."""
    return "".join(lower_base(char) for char in text)