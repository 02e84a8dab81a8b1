"""Name normalization.

Canonicalizes raw person-name strings into comparable parts. A name is
normalized exactly once and its parts are derived from that single string,
so `full` and the parts never drift apart.
"""

import re
import unicodedata

from pydantic import BaseModel, ConfigDict

HONORIFICS = ("dr", "prof", "professor", "mr", "mrs", "ms", "sir", "phd", "md")

_LAST_FIRST_RE = re.compile(r"^([^,]+),\s*(.+)$")
_HONORIFIC_RE = re.compile(r"\b(" + "|".join(HONORIFICS) + r")\b\.?", re.IGNORECASE)
_NON_LETTER_RE = re.compile(r"[^a-z\s]")
_WHITESPACE_RE = re.compile(r"\s+")


class NormalizedName(BaseModel):
    """A name split into normalized parts.

    `full` is the normalized string the parts were derived from. `last` is
    non-empty whenever the source had at least one token.
    """

    first: str = ""
    middle: str = ""
    last: str = ""
    full: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.full

    @property
    def first_last(self) -> str:
        """First and last name without the middle name."""
        return " ".join(p for p in (self.first, self.last) if p)

    @property
    def first_initial(self) -> str:
        return self.first[:1]


def strip_accents(text: str) -> str:
    """Decompose Unicode characters and drop combining marks."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name_string(raw: str | None) -> str:
    """Normalize a raw name to lowercase letters separated by single spaces.

    Steps, in order: strip diacritics, lowercase, rewrite "Last, First" to
    "First Last", drop honorifics, drop non-letters, collapse whitespace.
    """
    if not raw:
        return ""

    name = strip_accents(raw).lower()
    name = _LAST_FIRST_RE.sub(r"\2 \1", name)
    name = _HONORIFIC_RE.sub("", name)
    name = _NON_LETTER_RE.sub("", name)
    return _WHITESPACE_RE.sub(" ", name).strip()


def normalize_name(raw: str | None) -> NormalizedName:
    """Normalize a raw name and split it into first/middle/last parts.

    Examples:
        >>> normalize_name("Smith, John").full
        'john smith'
        >>> normalize_name("Dr. Mary Ann O'Neil").middle
        'ann'
    """
    full = normalize_name_string(raw)
    tokens = full.split()

    if not tokens:
        return NormalizedName()
    if len(tokens) == 1:
        return NormalizedName(last=tokens[0], full=full)
    if len(tokens) == 2:
        return NormalizedName(first=tokens[0], last=tokens[1], full=full)

    return NormalizedName(
        first=tokens[0],
        middle=" ".join(tokens[1:-1]),
        last=tokens[-1],
        full=full,
    )
