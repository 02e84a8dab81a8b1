"""String similarity metrics for name matching.

The tier thresholds in the name matcher are calibrated to the Dice
coefficient over character bigrams. The Indel ratio (RapidFuzz) is offered
for callers who recalibrate their thresholds against it.
"""

from collections import Counter
from typing import Callable

from rapidfuzz import fuzz

SimilarityFunc = Callable[[str, str], float]


def _bigrams(text: str) -> Counter[str]:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def dice_coefficient(a: str, b: str) -> float:
    """Dice coefficient over character bigrams, ignoring whitespace.

    Symmetric and bounded to [0, 1]. Identical strings score 1.0; a string
    shorter than two characters cannot form a bigram and scores 0.0 against
    anything but itself.
    """
    a = "".join(a.split())
    b = "".join(b.split())

    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    shared = sum((_bigrams(a) & _bigrams(b)).values())
    return (2.0 * shared) / (len(a) + len(b) - 2)


def indel_ratio(a: str, b: str) -> float:
    """Normalized Indel similarity in [0, 1] using RapidFuzz."""
    return fuzz.ratio(a, b) / 100.0


SIMILARITY_METRICS: dict[str, SimilarityFunc] = {
    "dice": dice_coefficient,
    "indel": indel_ratio,
}


def get_similarity(metric: str) -> SimilarityFunc:
    """Look up a similarity function by name.

    Raises:
        ValueError: If the metric is unknown
    """
    try:
        return SIMILARITY_METRICS[metric]
    except KeyError:
        raise ValueError(
            f"Unknown similarity metric {metric!r}; "
            f"expected one of {sorted(SIMILARITY_METRICS)}"
        ) from None
