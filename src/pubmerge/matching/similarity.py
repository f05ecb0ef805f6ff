"""Title similarity matching.

Titles are compared after normalization. Two titles match when they are
equal, when one contains the other (subtitles and truncated scrapes), or
when their Dice bigram coefficient reaches a length-dependent threshold.
Short titles need a higher score because each differing character moves
the coefficient further.
"""

from collections import Counter
from dataclasses import dataclass

from pubmerge.normalize.title import normalize_title

__all__ = [
    "DEFAULT_THRESHOLDS",
    "TitleMatchThresholds",
    "dice_coefficient",
    "is_similar_title",
]


@dataclass(frozen=True, slots=True)
class TitleMatchThresholds:
    """Dice thresholds for title matching.

    Attributes
    ----------
    short_threshold : float
        Minimum coefficient when the shorter title is under ``short_length``.
    long_threshold : float
        Minimum coefficient otherwise.
    short_length : int
        Normalized length below which a title counts as short.
    """

    short_threshold: float = 0.85
    long_threshold: float = 0.80
    short_length: int = 30

    def threshold_for(self, length: int) -> float:
        """Return the threshold for a shorter-title length."""
        return self.short_threshold if length < self.short_length else self.long_threshold


DEFAULT_THRESHOLDS = TitleMatchThresholds()


def _bigrams(text: str) -> Counter[str]:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def dice_coefficient(a: str, b: str) -> float:
    """Calculate the Sørensen-Dice coefficient over character bigrams.

    Whitespace is ignored. Bigrams are counted as a multiset, so repeated
    bigrams only match as often as they occur in both strings.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.

    Returns
    -------
    float
        Coefficient (0.0-1.0).

    Notes
    -----
    Dice = 2 * |A ∩ B| / (|A| + |B|)

    Strings shorter than two characters (after removing whitespace)
    have no bigrams and score 0.0 unless identical.
    """
    a = "".join(a.split())
    b = "".join(b.split())

    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    bigrams_a = _bigrams(a)
    bigrams_b = _bigrams(b)
    intersection = sum((bigrams_a & bigrams_b).values())

    return 2.0 * intersection / (len(a) + len(b) - 2)


def is_similar_title(
    a: str | None,
    b: str | None,
    thresholds: TitleMatchThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """Decide whether two raw titles describe the same work.

    Parameters
    ----------
    a : str | None
        First title.
    b : str | None
        Second title.
    thresholds : TitleMatchThresholds, optional
        Dice thresholds.

    Returns
    -------
    bool
        True if the titles match. Empty titles never match.
    """
    norm_a = normalize_title(a)
    norm_b = normalize_title(b)

    if not norm_a or not norm_b:
        return False
    if norm_a == norm_b:
        return True
    if norm_a in norm_b or norm_b in norm_a:
        return True

    threshold = thresholds.threshold_for(min(len(norm_a), len(norm_b)))
    return dice_coefficient(norm_a, norm_b) >= threshold
