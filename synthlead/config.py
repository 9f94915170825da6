"""Configuration settings for the synthetic lead generator."""
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

from synthlead.data.models import LengthTarget, StyleProfile

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# LLM Configuration
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "anthropic")  # "openai" or "anthropic"
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")

if LLM_PROVIDER == "openai":
    MODEL_NAME = os.getenv("MODEL_NAME", "gpt-4o-mini")
elif LLM_PROVIDER == "anthropic":
    MODEL_NAME = os.getenv("MODEL_NAME", "claude-haiku-4-5")
else:
    MODEL_NAME = os.getenv("MODEL_NAME", "claude-haiku-4-5")

# Trigger surface
ADMIN_SECRET = os.getenv("ADMIN_SECRET")
API_URL = os.getenv("API_URL", "http://localhost:8000")
REQUEST_TIMEOUT_SECONDS = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "60"))

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./leads.db")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("LOG_JSON", "false").lower() == "true"
LOG_FILE = os.getenv("LOG_FILE")

# Generation Configuration
CORPUS_WINDOW_SIZE = int(os.getenv("CORPUS_WINDOW_SIZE", "150"))
MIN_CORPUS_SIZE = int(os.getenv("MIN_CORPUS_SIZE", "3"))
SIMILARITY_THRESHOLD = float(os.getenv("SIMILARITY_THRESHOLD", "35"))
NGRAM_SIZE = 3
MAX_ATTEMPTS = int(os.getenv("MAX_ATTEMPTS", "5"))
MIN_EXAMPLES = 3
MAX_EXAMPLES = 5
EXAMPLE_FRACTION = 0.1  # share of the corpus sampled as examples, clamped to [MIN, MAX]
MAX_COMMENT_CHARS = 300
WORD_BOUNDARY_BACKOFF = 0.2  # only back off to a space inside the last 20% of the ceiling
HUMAN_ONLY_EXAMPLES = os.getenv("HUMAN_ONLY_EXAMPLES", "true").lower() == "true"

# (weight, min chars, max chars, token budget)
LENGTH_BUCKETS: List[Tuple[float, int, int, int]] = [
    (0.50, 40, 80, 60),    # short
    (0.30, 80, 150, 110),  # medium
    (0.15, 150, 220, 160),  # long
    (0.05, 220, 300, 200),  # max
]

# (weight, persona, tone, style guide, temperature)
STYLE_CATALOG: List[Tuple[float, str, str, str, float]] = [
    (
        0.20,
        "busy commuter",
        "concise",
        "Write in a concise, punchy way. Use short sentences. Remove filler words.",
        0.85,
    ),
    (
        0.15,
        "frustrated parent",
        "emotional",
        "Write with emotional intensity. Add frustration or urgency without ranting.",
        0.88,
    ),
    (
        0.15,
        "retired engineer",
        "measured",
        "Write in a calm, measured tone. Keep it factual and unemotional.",
        0.82,
    ),
    (
        0.10,
        "long-time elderly resident",
        "weary",
        "Use simple language, nostalgic references and a weary tone.",
        0.80,
    ),
    (
        0.15,
        "local shop owner",
        "sardonic",
        "Use dry British sarcasm. Keep the complaint but add subtle humour.",
        0.92,
    ),
    (
        0.15,
        "day visitor",
        "personal",
        "Focus on personal impact. Use 'I' and 'my' to make it individual.",
        0.87,
    ),
    (
        0.10,
        "holidaymaker",
        "matter-of-fact",
        "Write a brief observation. State facts without elaboration.",
        0.90,
    ),
]

# Scheduler Configuration
DAYTIME_START = int(os.getenv("DAYTIME_START", "8"))
DAYTIME_END = int(os.getenv("DAYTIME_END", "22"))
MIN_INTERVAL_MINUTES = float(os.getenv("MIN_INTERVAL_MINUTES", "45"))
MAX_INTERVAL_MINUTES = float(os.getenv("MAX_INTERVAL_MINUTES", "180"))
BACKOFF_BASE_SECONDS = float(os.getenv("BACKOFF_BASE_SECONDS", "30"))
PROVIDER_RETRY_CEILING = int(os.getenv("PROVIDER_RETRY_CEILING", "3"))
EXHAUSTION_EXTENSION = float(os.getenv("EXHAUSTION_EXTENSION", "1.5"))

# name -> (start hour, end hour, weight); higher weight = shorter interval
PEAK_HOURS: Dict[str, Tuple[int, int, float]] = {
    "morning": (8, 11, 1.5),
    "lunch": (12, 14, 1.8),
    "afternoon": (15, 17, 1.2),
    "evening": (18, 21, 1.6),
}

# Synthetic identity catalogs
UK_FIRST_NAMES = [
    "Oliver", "George", "Harry", "Jack", "Jacob", "Noah", "Charlie", "Muhammad",
    "Thomas", "Oscar", "William", "James", "Leo", "Alfie", "Henry", "Joshua",
    "Olivia", "Amelia", "Isla", "Emily", "Poppy", "Ava", "Isabella", "Jessica",
    "Lily", "Sophie", "Grace", "Sophia", "Mia", "Evie", "Ruby", "Ella",
    "Sarah", "Emma", "Laura", "Rachel", "Hannah", "Lucy", "Katie", "Rebecca",
    "John", "David", "Michael", "Paul", "Andrew", "Mark", "Peter", "Richard",
]

UK_LAST_NAMES = [
    "Smith", "Jones", "Williams", "Taylor", "Brown", "Davies", "Evans", "Wilson",
    "Thomas", "Roberts", "Johnson", "Lewis", "Walker", "Robinson", "Wood",
    "Thompson", "White", "Watson", "Jackson", "Wright", "Green", "Harris",
    "Cooper", "King", "Lee", "Martin", "Clarke", "James", "Morgan", "Hughes",
    "Edwards", "Hill", "Moore", "Clark", "Harrison", "Scott", "Young", "Morris",
    "Hall", "Ward",
]

EMAIL_DOMAINS = [
    "gmail.com",
    "outlook.com",
    "yahoo.co.uk",
    "hotmail.co.uk",
    "btinternet.com",
]


class LengthBucket(BaseModel):
    """One weighted bucket of the length distribution."""
    model_config = ConfigDict(frozen=True)

    weight: float = Field(gt=0.0)
    target: LengthTarget


class StyleOption(BaseModel):
    """One weighted entry of the style catalog."""
    model_config = ConfigDict(frozen=True)

    weight: float = Field(gt=0.0)
    style: StyleProfile


class PeakBand(BaseModel):
    """Named time-of-day band that shortens the scheduler interval."""
    model_config = ConfigDict(frozen=True)

    name: str
    start: int = Field(ge=0, le=24)
    end: int = Field(ge=0, le=24)
    weight: float = Field(ge=1.0)

    def contains(self, hour: int) -> bool:
        return self.start <= hour < self.end


def default_length_buckets() -> List[LengthBucket]:
    return [
        LengthBucket(
            weight=weight,
            target=LengthTarget(min=min_chars, max=max_chars, generation_budget=budget),
        )
        for weight, min_chars, max_chars, budget in LENGTH_BUCKETS
    ]


def default_style_catalog() -> List[StyleOption]:
    return [
        StyleOption(
            weight=weight,
            style=StyleProfile(
                persona=persona,
                tone=tone,
                style_guide=guide,
                temperature=temperature,
            ),
        )
        for weight, persona, tone, guide, temperature in STYLE_CATALOG
    ]


def default_peak_bands() -> List[PeakBand]:
    return [
        PeakBand(name=name, start=start, end=end, weight=weight)
        for name, (start, end, weight) in PEAK_HOURS.items()
    ]


class GenerationSettings(BaseModel):
    """Immutable knobs for one generation cycle."""
    model_config = ConfigDict(frozen=True)

    window_size: int = Field(default=CORPUS_WINDOW_SIZE, ge=1)
    min_corpus_size: int = Field(default=MIN_CORPUS_SIZE, ge=1)
    similarity_threshold: float = Field(default=SIMILARITY_THRESHOLD, ge=0.0, le=100.0)
    ngram_size: int = Field(default=NGRAM_SIZE, ge=1)
    max_attempts: int = Field(default=MAX_ATTEMPTS, ge=1)
    min_examples: int = Field(default=MIN_EXAMPLES, ge=1)
    max_examples: int = Field(default=MAX_EXAMPLES, ge=1)
    example_fraction: float = Field(default=EXAMPLE_FRACTION, ge=0.0, le=1.0)
    max_chars: int = Field(default=MAX_COMMENT_CHARS, ge=1)
    word_boundary_backoff: float = Field(default=WORD_BOUNDARY_BACKOFF, ge=0.0, le=1.0)
    human_only_examples: bool = HUMAN_ONLY_EXAMPLES
    dry_run: bool = False
    length_buckets: List[LengthBucket] = Field(default_factory=default_length_buckets)
    style_catalog: List[StyleOption] = Field(default_factory=default_style_catalog)

    @model_validator(mode="after")
    def _check_catalogs(self) -> "GenerationSettings":
        if not self.length_buckets:
            raise ValueError("length_buckets must not be empty")
        if not self.style_catalog:
            raise ValueError("style_catalog must not be empty")
        if self.min_examples > self.max_examples:
            raise ValueError("min_examples must not exceed max_examples")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "GenerationSettings":
        """Build settings from the module defaults (which come from the environment)."""
        return cls(**overrides)


class SchedulerSettings(BaseModel):
    """Immutable scheduling policy."""
    model_config = ConfigDict(frozen=True)

    active_start_hour: int = Field(default=DAYTIME_START, ge=0, le=23)
    active_end_hour: int = Field(default=DAYTIME_END, ge=1, le=24)
    min_interval_minutes: float = Field(default=MIN_INTERVAL_MINUTES, gt=0.0)
    max_interval_minutes: float = Field(default=MAX_INTERVAL_MINUTES, gt=0.0)
    backoff_base_seconds: float = Field(default=BACKOFF_BASE_SECONDS, ge=0.0)
    provider_retry_ceiling: int = Field(default=PROVIDER_RETRY_CEILING, ge=1)
    exhaustion_extension: float = Field(default=EXHAUSTION_EXTENSION, ge=1.0)
    peak_bands: List[PeakBand] = Field(default_factory=default_peak_bands)

    @model_validator(mode="after")
    def _check_window(self) -> "SchedulerSettings":
        if self.active_start_hour >= self.active_end_hour:
            raise ValueError("active_start_hour must be before active_end_hour")
        if self.min_interval_minutes > self.max_interval_minutes:
            raise ValueError("min_interval_minutes must not exceed max_interval_minutes")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "SchedulerSettings":
        return cls(**overrides)


def sqlite_path_from_url(url: Optional[str] = None) -> str:
    """Extract a filesystem path from a sqlite:/// URL."""
    url = url or DATABASE_URL
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "")
    return "leads.db"
