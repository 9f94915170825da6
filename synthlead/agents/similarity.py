"""Character n-gram overlap scoring between comments."""
import re
from typing import Iterable, Optional, Set, Union
from synthlead.data.models import HistoricalRecord, UniquenessCheck
from synthlead.utils.logging import get_logger

logger = get_logger(__name__)

_STRIP_PATTERN = re.compile(r"[^a-z0-9\s]")


def normalize(text: str) -> str:
    """Lowercase and drop everything outside [a-z0-9] and whitespace."""
    return _STRIP_PATTERN.sub("", text.lower())


def ngrams(text: str, n: int = 3) -> Set[str]:
    """Set of contiguous character n-grams of the normalized text."""
    normalized = normalize(text)
    return {normalized[i:i + n] for i in range(len(normalized) - n + 1)}


def similarity(a: str, b: str, n: int = 3) -> float:
    """Jaccard overlap of the two n-gram sets, as a percentage in [0, 100]."""
    grams_a = ngrams(a, n)
    grams_b = ngrams(b, n)
    union = grams_a | grams_b
    if not union:
        return 0.0
    return 100.0 * len(grams_a & grams_b) / len(union)


class SimilarityEngine:
    """Scores a candidate comment against a window of recent comments."""

    def __init__(self, threshold: float = 35.0, n: int = 3):
        self.threshold = threshold
        self.n = n

    def score(self, a: str, b: str) -> float:
        return similarity(a, b, self.n)

    def is_unique(
        self,
        candidate: str,
        window: Iterable[Union[HistoricalRecord, str]],
        threshold: Optional[float] = None,
    ) -> UniquenessCheck:
        """
        Check a candidate against every member of the window.

        The candidate is rejected when any member scores strictly above the
        threshold. ``max_similarity`` is always the true maximum across the
        window; the scan only stops early on an exact (100%) match since
        nothing can score higher.
        """
        threshold = self.threshold if threshold is None else threshold
        candidate_grams = ngrams(candidate, self.n)

        max_similarity = 0.0
        closest: Optional[str] = None

        for member in window:
            text = member.text if isinstance(member, HistoricalRecord) else member
            if not text:
                continue

            member_grams = ngrams(text, self.n)
            union = candidate_grams | member_grams
            score = 100.0 * len(candidate_grams & member_grams) / len(union) if union else 0.0

            if closest is None or score > max_similarity:
                max_similarity = score
                closest = text

            if score > threshold:
                logger.info(
                    f"Comment too similar ({score:.1f}%) to existing: \"{text[:50]}...\"",
                    extra_data={"similarity": round(score, 1)},
                )
            if max_similarity >= 100.0:
                break

        return UniquenessCheck(
            unique=max_similarity <= threshold,
            max_similarity=min(max_similarity, 100.0),
            closest_match=closest,
        )
