"""Failure kinds a generation cycle can end with."""


class SynthLeadError(Exception):
    """Base class for cycle failures. None of these should crash the process."""


class InsufficientCorpus(SynthLeadError):
    """Fewer historical records than the configured minimum."""

    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        super().__init__(
            f"Not enough existing comments to generate from "
            f"(found {available}, need at least {required})"
        )


class ProviderError(SynthLeadError):
    """The text generation call failed or returned something unusable."""


class UniquenessExhausted(SynthLeadError):
    """Every attempt in the cycle was rejected as too similar."""

    def __init__(self, result):
        self.result = result
        attempts = len(result.attempts)
        final = result.final_attempt
        score = final.similarity_score if final else 0.0
        super().__init__(
            f"Failed to generate unique comment after {attempts} attempts "
            f"(last similarity {score:.1f}%)"
        )


class PersistenceError(SynthLeadError):
    """The lead store could not be read, or an accepted record could not be committed."""
