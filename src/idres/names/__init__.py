"""Name handling: normalization, variants, common names and similarity."""

from .common import DEFAULT_REGISTRY, CommonNameRegistry, is_common_name
from .normalize import NormalizedName, normalize_name, normalize_name_string
from .similarity import dice_coefficient, get_similarity, indel_ratio
from .variants import are_name_variants, get_name_variants

__all__ = [
    "CommonNameRegistry",
    "DEFAULT_REGISTRY",
    "is_common_name",
    "NormalizedName",
    "normalize_name",
    "normalize_name_string",
    "dice_coefficient",
    "get_similarity",
    "indel_ratio",
    "are_name_variants",
    "get_name_variants",
]
