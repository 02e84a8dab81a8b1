"""Registry of names with high real-world collision risk.

A hit is an annotation that raises review priority ("common name - verify
manually"). It never blocks or filters a match.
"""

import re
from typing import Iterable

from ..errors import ConfigurationError
from .normalize import normalize_name

COMMON_NAMES: frozenset[str] = frozenset({
    # Common Western names
    "john smith", "james johnson", "robert williams", "michael brown", "david jones",
    "william davis", "richard miller", "joseph wilson", "thomas moore", "charles taylor",
    "mary johnson", "patricia williams", "jennifer brown", "elizabeth jones", "linda davis",
    # Common Chinese names (romanized)
    "wei wang", "jing zhang", "li wang", "wei zhang", "lei wang", "jian liu",
    "wei liu", "yang li", "fang chen", "min li", "xin wang", "yu wang",
    "bin wang", "hai zhang", "lei zhang", "yong wang", "lin chen", "jun liu",
    # Common Korean names
    "kim lee", "lee kim", "park kim", "jin park",
    # Common Indian names
    "amit kumar", "raj kumar", "sanjay sharma", "priya sharma",
    # Common Japanese names
    "takashi yamamoto", "yuki tanaka", "hiroshi suzuki",
})

_ENTRY_RE = re.compile(r"^[a-z]+( [a-z]+)+$")


class CommonNameRegistry:
    """Read-only set of lowercase "first last" strings.

    Entries are validated at construction; a malformed entry raises
    ConfigurationError so bad configuration fails at startup.
    """

    def __init__(self, names: Iterable[str] = COMMON_NAMES, extra: Iterable[str] = ()):
        entries = list(names) + list(extra)
        invalid = [entry for entry in entries if not _ENTRY_RE.match(entry)]
        if invalid:
            raise ConfigurationError(
                f"Common-name entries must be lowercase 'first last' strings: {invalid}"
            )
        self._names = frozenset(entries)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def is_common(self, name: str | None) -> bool:
        """Check the normalized full name and its first+last pair."""
        parts = normalize_name(name)
        if parts.is_empty:
            return False

        if parts.full in self._names:
            return True

        if parts.first and parts.last:
            return parts.first_last in self._names

        return False


DEFAULT_REGISTRY = CommonNameRegistry()


def is_common_name(name: str | None) -> bool:
    """Check a name against the default registry."""
    return DEFAULT_REGISTRY.is_common(name)
