"""
Pure text derivations for editorial records.

Slugs and reading times are computed from a record's title and body before it
is written. Both functions are deterministic and never touch the database.
"""

import math
import re

from django.conf import settings
from django.utils.text import slugify

# Arabic -> Latin transliteration. This table is a policy choice shared by
# every entity; keep it stable, existing URLs depend on it.
ARABIC_TO_LATIN = {
    "ا": "a", "أ": "a", "إ": "i", "آ": "aa",
    "ب": "b", "ت": "t", "ث": "th", "ج": "j", "ح": "h", "خ": "kh",
    "د": "d", "ذ": "dh", "ر": "r", "ز": "z", "س": "s", "ش": "sh",
    "ص": "s", "ض": "d", "ط": "t", "ظ": "z", "ع": "a", "غ": "gh",
    "ف": "f", "ق": "q", "ك": "k", "ل": "l", "م": "m", "ن": "n",
    "ه": "h", "و": "w", "ي": "y", "ى": "a", "ة": "h",
    "ء": "", "ئ": "y", "ؤ": "w",
}

# Multi-character entries, matched as exact substrings before the table above
ARABIC_DIGRAPHS = {
    "لا": "la",
}

DEFAULT_PLACEHOLDER = "item"

# Leaves room for "-<n>" suffixes inside a 255 character slug column
SLUG_MAX_BASE_LENGTH = 200

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_SEPARATOR_RE = re.compile(r"[-_\s]+")


def transliterate(text: str) -> str:
    """Replace Arabic letters with their Latin equivalents."""
    for digraph, latin in ARABIC_DIGRAPHS.items():
        text = text.replace(digraph, latin)
    return "".join(ARABIC_TO_LATIN.get(char, char) for char in text)


def generate_slug(title: str, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    """
    Turn a title into a URL-safe candidate slug.

    The result is lower-case ASCII letters, digits and single hyphens with no
    leading or trailing hyphen. Characters that cannot be transliterated are
    dropped. Returns `placeholder` when nothing survives.

    This is the pre-uniqueness candidate; see core.services.slugs for
    collision handling.

    Examples:
        >>> generate_slug("الأخبار العاجلة اليوم")
        'alakhbar-alaajlh-alywm'
        >>> generate_slug("  Hello,  World!  ")
        'hello-world'
        >>> generate_slug("؟؟؟")
        'item'
    """
    if not title:
        return placeholder

    text = transliterate(title.lower())
    text = slugify(text, allow_unicode=False)
    text = _SEPARATOR_RE.sub("-", text).strip("-")

    if len(text) > SLUG_MAX_BASE_LENGTH:
        ends_on_word = text[SLUG_MAX_BASE_LENGTH] == "-"
        text = text[:SLUG_MAX_BASE_LENGTH]
        # Prefer cutting on a word boundary
        if not ends_on_word and "-" in text:
            text = text.rsplit("-", 1)[0]
        text = text.strip("-")

    return text or placeholder


def count_words(body: str) -> int:
    """Count whitespace-separated words, ignoring HTML tags."""
    if not body:
        return 0
    return len(_HTML_TAG_RE.sub(" ", body).split())


def estimate_minutes(body: str, wpm: int | None = None) -> int:
    """
    Estimated reading time in whole minutes.

    ceil(words / wpm), at least 1 for any body with words and 0 for an empty
    body. `wpm` defaults to settings.NEWSROOM_READING_SPEED_WPM.
    """
    words = count_words(body)
    if words == 0:
        return 0

    speed = wpm or settings.NEWSROOM_READING_SPEED_WPM
    return max(1, math.ceil(words / speed))
