"""Content generator - turns examples and a voice into a candidate comment."""
import re
from typing import List, Optional, Protocol
from synthlead.config import GenerationSettings
from synthlead.data.models import HistoricalRecord, LengthTarget, StyleProfile
from synthlead.errors import ProviderError
from synthlead.utils.llm import get_llm_client
from synthlead.utils.logging import get_logger

logger = get_logger(__name__)

WRAPPING_QUOTES = "\"'“”‘’"
LAST_WHITESPACE = re.compile(r"\s(?=\S*$)")


class CandidateGenerator(Protocol):
    """Anything that can produce a candidate comment."""

    def generate(
        self,
        examples: List[HistoricalRecord],
        style: StyleProfile,
        length: LengthTarget,
    ) -> str:
        ...


def strip_wrapping_quotes(text: str) -> str:
    """Drop one leading and one trailing quote character, if present."""
    text = text.strip()
    if text and text[0] in WRAPPING_QUOTES:
        text = text[1:]
    if text and text[-1] in WRAPPING_QUOTES:
        text = text[:-1]
    return text.strip()


def truncate_to_ceiling(text: str, ceiling: int, backoff: float = 0.2) -> str:
    """
    Cut text to at most ``ceiling`` characters.

    After the hard cut, back off to the last whitespace only if it sits
    inside the final ``backoff`` share of the ceiling; otherwise keep the hard
    cut rather than losing most of the comment.
    """
    if len(text) <= ceiling:
        return text
    cut = text[:ceiling]
    if text[ceiling].isspace() or cut[-1].isspace():
        return cut.rstrip()
    boundary = LAST_WHITESPACE.search(cut)
    if boundary and boundary.start() > ceiling * (1 - backoff):
        cut = cut[:boundary.start()]
    return cut.rstrip()


class ContentGenerator:
    """Asks the LLM provider for one new comment in a given voice."""

    def __init__(self, llm=None, settings: Optional[GenerationSettings] = None):
        self.llm = llm or get_llm_client()
        self.settings = settings or GenerationSettings.from_env()

    def generate(
        self,
        examples: List[HistoricalRecord],
        style: StyleProfile,
        length: LengthTarget,
    ) -> str:
        """
        Generate a candidate comment.

        Args:
            examples: Recent real comments shown to the model
            style: Persona, tone and style guide to write in
            length: Character range and token budget

        Returns:
            Post-processed comment text

        Raises:
            ProviderError: from the LLM client, or when nothing usable is left
                after post-processing
        """
        prompt = self.build_prompt(examples, style, length)
        messages = [{"role": "user", "content": prompt}]

        raw = self.llm.call(
            messages=messages,
            temperature=style.temperature,
            max_tokens=length.generation_budget,
        )
        text = self.postprocess(raw)
        if not text:
            raise ProviderError(f"empty completion (raw reply: {raw!r})")
        logger.debug(
            f"Generated candidate ({len(text)} chars)",
            extra_data={"persona": style.persona, "raw_chars": len(raw)},
        )
        return text

    def postprocess(self, raw: str) -> str:
        text = strip_wrapping_quotes(raw)
        return truncate_to_ceiling(
            text,
            self.settings.max_chars,
            self.settings.word_boundary_backoff,
        )

    def build_prompt(
        self,
        examples: List[HistoricalRecord],
        style: StyleProfile,
        length: LengthTarget,
    ) -> str:
        example_lines = "\n".join(
            f'{idx}. "{record.text}" ({record.category.value}, {len(record.text)} chars)'
            for idx, record in enumerate(examples, start=1)
        )

        return f"""You are helping generate realistic community feedback for a local traffic campaign website - residents and visitors concerned about congestion, parking, safety and tourism pressure on a small town.

Here are some recent REAL comments from community members (with lengths):

{example_lines}

Write ONE new comment in this voice:
- Persona: {style.persona}
- Tone: {style.tone}
- Style: {style.style_guide}

Requirements:
- Express similar concerns (traffic, congestion, tourism impacts, safety, quality of life)
- Be {length.min}-{length.max} characters long (important: match this range)
- Sound natural and authentic, like a real resident or visitor

CRITICAL:
- Do NOT copy words, phrases or sentence structures from the examples
- Use COMPLETELY DIFFERENT vocabulary - if examples say "gridlock", use alternatives like "standstill", "crawling", "bottlenecked"
- Keep the overlap with every example as low as possible

Respond with ONLY the comment text, no quotes, no preamble, no explanation."""
