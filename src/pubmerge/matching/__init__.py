"""Cross-source record matching.

Main Components
---------------
- KeyIndex: DOI/title keyed store of canonical publications
- is_similar_title: Dice-based title matcher
"""

from .key_index import DOI_PREFIX, TITLE_PREFIX, KeyIndex, key_for
from .similarity import (
    DEFAULT_THRESHOLDS,
    TitleMatchThresholds,
    dice_coefficient,
    is_similar_title,
)

__all__ = [
    "DOI_PREFIX",
    "TITLE_PREFIX",
    "KeyIndex",
    "key_for",
    "DEFAULT_THRESHOLDS",
    "TitleMatchThresholds",
    "dice_coefficient",
    "is_similar_title",
]
