"""Record factory - wraps an accepted comment in a plausible synthetic lead."""
import random
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional, Sequence
from synthlead.agents.selector import weighted_choice
from synthlead.config import EMAIL_DOMAINS, UK_FIRST_NAMES, UK_LAST_NAMES
from synthlead.data.models import Category, HistoricalRecord, SourceKind


def category_distribution(records: Sequence[HistoricalRecord]) -> Dict[Category, int]:
    """Count records per category."""
    counts: Dict[Category, int] = {}
    for record in records:
        counts[record.category] = counts.get(record.category, 0) + 1
    return counts


class RecordFactory:
    """Synthesizes identity and category for an accepted comment."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        first_names: Optional[List[str]] = None,
        last_names: Optional[List[str]] = None,
        domains: Optional[List[str]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.rng = rng or random.Random()
        self.first_names = first_names or UK_FIRST_NAMES
        self.last_names = last_names or UK_LAST_NAMES
        self.domains = domains or EMAIL_DOMAINS
        self.clock = clock

    def email_for(self, first_name: str, last_name: str) -> str:
        first = first_name.lower()
        last = last_name.lower()
        formats = [
            f"{first}.{last}",
            f"{first}{last}",
            f"{first}_{last}",
            f"{first}{self.rng.randrange(999)}",
        ]
        return f"{self.rng.choice(formats)}@{self.rng.choice(self.domains)}"

    def pick_category(self, distribution: Mapping[Category, int]) -> Category:
        """Sample a category proportionally to how often it already occurs."""
        weighted = [(category, count) for category, count in distribution.items() if count > 0]
        if not weighted:
            return Category.LOCAL
        categories = [category for category, _ in weighted]
        counts = [count for _, count in weighted]
        return weighted_choice(categories, counts, self.rng)

    def synthesize(
        self,
        accepted_text: str,
        distribution: Mapping[Category, int],
    ) -> HistoricalRecord:
        first_name = self.rng.choice(self.first_names)
        last_name = self.rng.choice(self.last_names)
        return HistoricalRecord(
            text=accepted_text,
            created_at=self.clock(),
            category=self.pick_category(distribution),
            source_kind=SourceKind.SYNTHETIC,
            first_name=first_name,
            last_name=last_name,
            email=self.email_for(first_name, last_name),
        )
