"""Shared fixtures."""
import pytest

from synthlead.config import GenerationSettings, SchedulerSettings
from tests.fixtures.stubs import SCENARIO_TEXTS, InMemoryCorpus, make_records


@pytest.fixture
def scenario_records():
    return make_records(SCENARIO_TEXTS)


@pytest.fixture
def corpus(scenario_records):
    return InMemoryCorpus(scenario_records)


@pytest.fixture
def settings():
    return GenerationSettings(
        similarity_threshold=35.0,
        max_attempts=5,
        min_corpus_size=3,
        window_size=150,
        human_only_examples=True,
        dry_run=False,
    )


@pytest.fixture
def scheduler_settings():
    return SchedulerSettings(
        active_start_hour=8,
        active_end_hour=22,
        min_interval_minutes=45,
        max_interval_minutes=180,
        backoff_base_seconds=10,
        provider_retry_ceiling=3,
        exhaustion_extension=1.5,
    )
