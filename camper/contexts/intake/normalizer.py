"""
Campaign plan markdown normalizer for the Intake context.

Campaign plans are written by hand, exported from docs tools, or pasted from
chat, so the same plan can arrive with smart quotes, non-breaking spaces,
Windows line endings or typographic dashes. These are normalized BEFORE parsing
so the line patterns only have to deal with plain ASCII punctuation.
"""

import unicodedata

# Unicode replacements: problematic char to ASCII equivalent
UNICODE_REPLACEMENTS = {
    # Spaces
    "\u00a0": " ",  # non-breaking space
    "\u202f": " ",  # narrow no-break space
    # Zero-width characters, removed
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM / zero-width no-break space
    # Quotes
    "\u2018": "'",  # left single quote
    "\u2019": "'",  # right single quote
    "\u201c": '"',  # left double quote
    "\u201d": '"',  # right double quote
    # Dashes (single "-" so "Alpha - $50" still reads as name/amount)
    "\u2013": "-",  # en dash
    "\u2014": "-",  # em dash
    "\u2212": "-",  # minus sign
    # Bullets
    "\u2022": "*",  # bullet
    "\u00b7": "*",  # middle dot (used as bullet)
}


def normalize_unicode(text: str) -> str:
    """
    Normalize unicode characters that cause parsing issues.

    Applies NFKC normalization and replaces common problematic characters
    with ASCII equivalents. Emoji are left alone (section breaks rely on them).

    Args:
        text: Raw text possibly containing problematic unicode

    Returns:
        Text with normalized unicode
    """
    text = unicodedata.normalize("NFKC", text)

    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)

    return text


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def preprocess_campaign_markdown(text: str) -> str:
    """
    Preprocess campaign plan markdown before line parsing.

    This is the main entry point for markdown normalization.
    Handles:
    - Line ending normalization (CRLF and CR to LF)
    - Unicode normalization (non-breaking spaces, smart quotes, dashes, etc.)

    Args:
        text: Raw campaign plan markdown

    Returns:
        Normalized markdown ready for line parsing
    """
    text = normalize_line_endings(text)
    return normalize_unicode(text)
