"""Uniqueness gate - retry generation until a candidate clears the similarity check."""
from typing import List, Optional, Sequence
from synthlead.agents.generator import CandidateGenerator
from synthlead.agents.selector import StyleSelector
from synthlead.agents.similarity import SimilarityEngine
from synthlead.data.models import (
    CycleOutcome,
    GenerationAttempt,
    GenerationCycleResult,
    HistoricalRecord,
)
from synthlead.utils.logging import get_logger

logger = get_logger(__name__)


class UniquenessGate:
    """
    Runs the sample -> generate -> score loop of one cycle.

    Every retry draws a fresh example subset, style and length. A
    ProviderError from the generator is not caught here: it ends the cycle
    immediately and the attempts made so far are discarded with it.
    """

    def __init__(
        self,
        generator: CandidateGenerator,
        selector: StyleSelector,
        engine: SimilarityEngine,
        max_attempts: int = 5,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.generator = generator
        self.selector = selector
        self.engine = engine
        self.max_attempts = max_attempts

    def run(
        self,
        example_pool: Sequence[HistoricalRecord],
        window: Sequence[HistoricalRecord],
        threshold: Optional[float] = None,
    ) -> GenerationCycleResult:
        attempts: List[GenerationAttempt] = []

        for attempt_number in range(1, self.max_attempts + 1):
            logger.info(f"Attempt {attempt_number}/{self.max_attempts}...")

            # Sampling
            examples = self.selector.sample_examples(example_pool)
            style = self.selector.pick_style()
            length = self.selector.pick_length()

            # Generating
            candidate = self.generator.generate(examples, style, length)

            # Scoring
            check = self.engine.is_unique(candidate, window, threshold)
            attempt = GenerationAttempt(
                attempt_number=attempt_number,
                candidate_text=candidate,
                similarity_score=check.max_similarity,
                accepted=check.unique,
                closest_match=check.closest_match,
                style=style,
                length=length,
            )
            attempts.append(attempt)

            if check.unique:
                logger.info(
                    f"Generated unique comment ({len(candidate)} chars)",
                    extra_data={
                        "attempt": attempt_number,
                        "max_similarity": round(check.max_similarity, 1),
                        "persona": style.persona,
                    },
                )
                return GenerationCycleResult(outcome=CycleOutcome.ACCEPTED, attempts=attempts)

            if attempt_number < self.max_attempts:
                logger.info(
                    "Retrying with fresh examples and style...",
                    extra_data={"max_similarity": round(check.max_similarity, 1)},
                )

        logger.warning(f"Failed to generate unique comment after {self.max_attempts} attempts")
        return GenerationCycleResult(outcome=CycleOutcome.EXHAUSTED, attempts=attempts)
