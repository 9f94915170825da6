"""Weighted selection of voice and length for a new comment."""
import random
from typing import List, Optional, Sequence, TypeVar
from synthlead.config import GenerationSettings, LengthBucket, StyleOption
from synthlead.data.models import HistoricalRecord, LengthTarget, StyleProfile

T = TypeVar("T")


def weighted_choice(items: Sequence[T], weights: Sequence[float], rng: random.Random) -> T:
    """Cumulative-weight draw against a single uniform value."""
    if not items:
        raise ValueError("Cannot choose from an empty catalog")
    total = sum(weights)
    draw = rng.random() * total
    cumulative = 0.0
    for item, weight in zip(items, weights):
        cumulative += weight
        if draw < cumulative:
            return item
    # Floating point slack on the last bucket
    return items[-1]


class StyleSelector:
    """Draws StyleProfile and LengthTarget values from the configured catalogs."""

    def __init__(
        self,
        settings: Optional[GenerationSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or GenerationSettings.from_env()
        self.rng = rng or random.Random()

    @property
    def styles(self) -> List[StyleOption]:
        return self.settings.style_catalog

    @property
    def buckets(self) -> List[LengthBucket]:
        return self.settings.length_buckets

    def pick_style(self) -> StyleProfile:
        option = weighted_choice(self.styles, [s.weight for s in self.styles], self.rng)
        return option.style

    def pick_length(self) -> LengthTarget:
        bucket = weighted_choice(self.buckets, [b.weight for b in self.buckets], self.rng)
        return bucket.target

    def example_count(self, corpus_size: int) -> int:
        """Examples per prompt: a tenth of the corpus, clamped to [min, max]."""
        s = self.settings
        count = max(s.min_examples, int(corpus_size * s.example_fraction))
        return min(s.max_examples, count, corpus_size)

    def sample_examples(self, records: Sequence[HistoricalRecord]) -> List[HistoricalRecord]:
        """Fresh random subset of the pool, without replacement."""
        return self.rng.sample(list(records), self.example_count(len(records)))
