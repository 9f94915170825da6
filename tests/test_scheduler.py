"""Tests for scheduling policy and the scheduler loop."""

import logging
import random
import sqlite3
import threading
from datetime import datetime, timedelta

import pytest

from synthlead.agents.orchestrator import Orchestrator
from synthlead.config import PeakBand, SchedulerSettings
from synthlead.data.models import CycleOutcome, GenerationAttempt, GenerationCycleResult
from synthlead.errors import InsufficientCorpus, ProviderError
from synthlead.memory.corpus import LeadStore
from synthlead.scheduler.policy import (
    backoff_delay,
    extended_interval,
    is_active,
    next_active_start,
    peak_weight,
    seconds_until_active,
    weighted_interval,
)
from synthlead.scheduler.runner import Scheduler
from tests.fixtures.stubs import RecordingSleep, ScriptedGenerator


class FixedUniform(random.Random):
    def __init__(self, minutes):
        super().__init__(0)
        self.minutes = minutes

    def uniform(self, a, b):
        return self.minutes


def accepted_result():
    return GenerationCycleResult(
        outcome=CycleOutcome.ACCEPTED,
        attempts=[GenerationAttempt(attempt_number=1, candidate_text="ok", similarity_score=5.0, accepted=True)],
        record_id=42,
    )


def exhausted_result():
    return GenerationCycleResult(
        outcome=CycleOutcome.EXHAUSTED,
        attempts=[
            GenerationAttempt(attempt_number=i, candidate_text="dup", similarity_score=100.0, accepted=False)
            for i in range(1, 6)
        ],
    )


class CountingTrigger:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        outcome = self.outcomes[min(self.calls, len(self.outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class TestActiveHours:

    @pytest.mark.parametrize("now,expected_hours", [
        (datetime(2024, 6, 1, 23, 0), 9),
        (datetime(2024, 6, 1, 22, 0), 10),
        (datetime(2024, 6, 1, 5, 30), 2.5),
        (datetime(2024, 6, 1, 0, 0), 8),
    ])
    def test_sleep_until_window_opens(self, scheduler_settings, now, expected_hours):
        assert seconds_until_active(now, scheduler_settings) == pytest.approx(expected_hours * 3600, abs=1)

    def test_inside_window_no_sleep(self, scheduler_settings):
        assert seconds_until_active(datetime(2024, 6, 1, 12, 15), scheduler_settings) == 0

    def test_next_start_rolls_over_month_end(self, scheduler_settings):
        assert next_active_start(datetime(2024, 6, 30, 23, 45, 10), scheduler_settings) == datetime(2024, 7, 1, 8, 0)

    @pytest.mark.parametrize("hour,active", [(7, False), (8, True), (21, True), (22, False)])
    def test_is_active(self, scheduler_settings, hour, active):
        assert is_active(hour, scheduler_settings) is active

    def test_invalid_window_rejected(self):
        with pytest.raises(ValueError):
            SchedulerSettings(active_start_hour=22, active_end_hour=8)


class TestIntervals:

    @pytest.mark.parametrize("hour,weight", [
        (8, 1.5), (10, 1.5), (11, 1.0), (12, 1.8), (13, 1.8),
        (15, 1.2), (17, 1.0), (18, 1.6), (20, 1.6), (21, 1.0),
    ])
    def test_peak_weights(self, scheduler_settings, hour, weight):
        assert peak_weight(hour, scheduler_settings) == weight

    def test_weighted_interval_divides_by_peak_weight(self, scheduler_settings):
        assert weighted_interval(12, FixedUniform(90), scheduler_settings) == pytest.approx(90 / 1.8 * 60)
        assert weighted_interval(21, FixedUniform(90), scheduler_settings) == pytest.approx(90 * 60)

    def test_weighted_interval_stays_in_range(self, scheduler_settings):
        rng = random.Random(8)
        for hour in range(8, 22):
            seconds = weighted_interval(hour, rng, scheduler_settings)
            assert 45 / 1.8 * 60 <= seconds <= 180 * 60

    def test_extension_is_capped(self, scheduler_settings):
        assert extended_interval(60 * 60, scheduler_settings) == pytest.approx(90 * 60)
        assert extended_interval(150 * 60, scheduler_settings) == pytest.approx(180 * 60)

    def test_backoff_doubles(self, scheduler_settings):
        assert [backoff_delay(i, scheduler_settings) for i in range(3)] == [10, 20, 40]

    def test_peak_band_weight_must_shorten(self):
        with pytest.raises(ValueError):
            PeakBand(name="slow", start=9, end=10, weight=0.5)


class TestSchedulerLoop:

    def test_night_sleeps_until_morning_without_cycling(self, scheduler_settings):
        trigger = CountingTrigger(accepted_result())
        scheduler = Scheduler(trigger, scheduler_settings, clock=lambda: datetime(2024, 6, 1, 23, 0))
        sleep = RecordingSleep(stop_after=1, scheduler=scheduler)
        scheduler._sleep = sleep

        scheduler.run()

        assert trigger.calls == 0
        assert sleep.durations == [pytest.approx(9 * 3600, abs=1)]
        assert scheduler.state.next_wake_at == datetime(2024, 6, 2, 8, 0)

    def test_provider_failures_back_off_then_give_up(self, scheduler_settings):
        trigger = CountingTrigger(ProviderError("connection refused"))
        sleep = RecordingSleep()
        scheduler = Scheduler(
            trigger,
            scheduler_settings,
            rng=FixedUniform(90),
            clock=lambda: datetime(2024, 6, 1, 12, 0),
            sleep=sleep,
        )

        interval = scheduler.run_once()

        assert trigger.calls == 3
        assert sleep.durations == [10, 20, 40]
        assert scheduler.state.last_status == "provider_error"
        assert scheduler.state.cooling_off is False
        assert interval == pytest.approx(90 / 1.8 * 60)

    def test_recovers_after_transient_provider_failure(self, scheduler_settings):
        trigger = CountingTrigger(ProviderError("timeout"), accepted_result())
        sleep = RecordingSleep()
        scheduler = Scheduler(trigger, scheduler_settings, clock=lambda: datetime(2024, 6, 1, 9, 0), sleep=sleep)

        scheduler.run_once()

        assert trigger.calls == 2
        assert sleep.durations == [10]
        assert scheduler.state.last_status == "accepted"

    def test_exhaustion_extends_next_interval(self, scheduler_settings):
        scheduler = Scheduler(
            CountingTrigger(exhausted_result()),
            scheduler_settings,
            rng=FixedUniform(100),
            clock=lambda: datetime(2024, 6, 1, 13, 0),
            sleep=RecordingSleep(),
        )

        interval = scheduler.run_once()

        assert interval == pytest.approx(100 / 1.8 * 1.5 * 60)
        assert scheduler.state.cooling_off is True
        assert scheduler.state.consecutive_exhaustions == 1
        assert scheduler.state.last_status == "exhausted"

    def test_exhaustion_extension_capped_at_max_interval(self):
        settings = SchedulerSettings(min_interval_minutes=45, max_interval_minutes=180, peak_bands=[])
        scheduler = Scheduler(
            CountingTrigger(exhausted_result()),
            settings,
            rng=FixedUniform(170),
            clock=lambda: datetime(2024, 6, 1, 12, 0),
            sleep=RecordingSleep(),
        )
        assert scheduler.run_once() == pytest.approx(180 * 60)

    def test_success_clears_cooling_off(self, scheduler_settings):
        scheduler = Scheduler(
            CountingTrigger(exhausted_result(), accepted_result()),
            scheduler_settings,
            clock=lambda: datetime(2024, 6, 1, 10, 0),
            sleep=RecordingSleep(),
        )
        scheduler.run_once()
        scheduler.run_once()
        assert scheduler.state.cooling_off is False
        assert scheduler.state.consecutive_exhaustions == 0
        assert scheduler.state.cycles_run == 2

    def test_insufficient_corpus_is_not_retried(self, scheduler_settings):
        trigger = CountingTrigger(InsufficientCorpus(1, 3))
        sleep = RecordingSleep()
        scheduler = Scheduler(trigger, scheduler_settings, clock=lambda: datetime(2024, 6, 1, 10, 0), sleep=sleep)

        scheduler.run_once()

        assert trigger.calls == 1
        assert sleep.durations == []
        assert scheduler.state.last_status == "InsufficientCorpus"

    def test_unreadable_store_does_not_crash_loop(self, scheduler_settings, settings, tmp_path):
        store = LeadStore(str(tmp_path / "leads.db"))
        conn = sqlite3.connect(store.db_path)
        conn.execute("DROP TABLE leads")
        conn.commit()
        conn.close()
        orchestrator = Orchestrator(
            corpus=store,
            sink=store,
            generator=ScriptedGenerator(["unused"]),
            settings=settings,
        )
        sleep = RecordingSleep()
        scheduler = Scheduler(
            orchestrator.run_cycle,
            scheduler_settings,
            clock=lambda: datetime(2024, 6, 1, 10, 0),
            sleep=sleep,
        )

        scheduler.run(max_cycles=1)

        assert scheduler.state.cycles_run == 1
        assert scheduler.state.last_status == "PersistenceError"
        assert sleep.durations == []

    def test_exhaustion_logged_as_warning(self, scheduler_settings, caplog):
        scheduler = Scheduler(
            CountingTrigger(exhausted_result()),
            scheduler_settings,
            clock=lambda: datetime(2024, 6, 1, 10, 0),
            sleep=RecordingSleep(),
        )

        with caplog.at_level(logging.INFO, logger="synthlead.scheduler.runner"):
            scheduler.run_once()

        (record,) = [r for r in caplog.records if getattr(r, "extra_data", {}).get("outcome")]
        assert record.levelno == logging.WARNING
        assert record.extra_data == {"outcome": "exhausted", "attempts": 5, "similarity": 100.0}

    def test_waits_interval_between_cycles(self, scheduler_settings):
        trigger = CountingTrigger(accepted_result())
        scheduler = Scheduler(
            trigger,
            scheduler_settings,
            rng=FixedUniform(60),
            clock=lambda: datetime(2024, 6, 1, 22, 0) - timedelta(hours=1),
        )
        sleep = RecordingSleep(stop_after=2, scheduler=scheduler)
        scheduler._sleep = sleep

        scheduler.run()

        assert trigger.calls == 2
        assert sleep.durations == [pytest.approx(3600), pytest.approx(3600)]

    def test_max_cycles(self, scheduler_settings):
        trigger = CountingTrigger(accepted_result())
        scheduler = Scheduler(
            trigger,
            scheduler_settings,
            clock=lambda: datetime(2024, 6, 1, 12, 0),
            sleep=RecordingSleep(),
        )
        scheduler.run(max_cycles=3)
        assert trigger.calls == 3

    def test_stop_interrupts_night_sleep(self, scheduler_settings):
        trigger = CountingTrigger(accepted_result())
        scheduler = Scheduler(trigger, scheduler_settings, clock=lambda: datetime(2024, 6, 1, 23, 0))

        worker = threading.Thread(target=scheduler.run)
        worker.start()
        scheduler.stop()
        worker.join(timeout=5)

        assert not worker.is_alive()
        assert trigger.calls == 0

    def test_stop_before_run_does_nothing(self, scheduler_settings):
        trigger = CountingTrigger(accepted_result())
        scheduler = Scheduler(trigger, scheduler_settings, clock=lambda: datetime(2024, 6, 1, 12, 0))
        scheduler.stop()
        scheduler.run()
        assert trigger.calls == 0
