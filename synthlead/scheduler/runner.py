"""Scheduler loop - one cycle at a time, asleep outside active hours."""
import random
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional
from synthlead.config import SchedulerSettings
from synthlead.data.models import GenerationCycleResult
from synthlead.errors import ProviderError, SynthLeadError
from synthlead.scheduler.policy import (
    ScheduleState,
    backoff_delay,
    extended_interval,
    seconds_until_active,
    weighted_interval,
)
from synthlead.utils.logging import get_logger, log_cycle_outcome

logger = get_logger(__name__)

Trigger = Callable[[], GenerationCycleResult]


class Scheduler:
    """
    Drives a cycle trigger on a time-of-day weighted cadence.

    ``clock`` and ``sleep`` are injectable. The default sleep waits on the
    stop event, so ``stop()`` interrupts any pending wait immediately. An
    in-flight trigger call is never interrupted.
    """

    def __init__(
        self,
        trigger: Trigger,
        settings: Optional[SchedulerSettings] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.trigger = trigger
        self.settings = settings or SchedulerSettings.from_env()
        self.rng = rng or random.Random()
        self.clock = clock
        self._stop = threading.Event()
        self._sleep = sleep or self._stop.wait
        self.state = ScheduleState.initial(self.settings)

    def stop(self):
        """Request a graceful stop; takes effect at the next wait or cycle boundary."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run(self, max_cycles: Optional[int] = None):
        """Loop until stopped (or until ``max_cycles`` cycles have run)."""
        logger.info(
            "Synthetic lead scheduler started",
            extra_data={
                "active_hours": f"{self.settings.active_start_hour}:00-{self.settings.active_end_hour}:00",
                "interval_minutes": f"{self.settings.min_interval_minutes:g}-{self.settings.max_interval_minutes:g}",
            },
        )

        while not self.stopped:
            now = self.clock()
            sleep_seconds = seconds_until_active(now, self.settings)
            if sleep_seconds > 0:
                wake_at = now + timedelta(seconds=sleep_seconds)
                self.state.next_wake_at = wake_at
                logger.info(
                    f"Outside active hours. Sleeping until {wake_at:%Y-%m-%d %H:%M} "
                    f"({sleep_seconds / 3600:.1f} hours)"
                )
                if not self._wait(sleep_seconds):
                    break
                logger.info("Waking up")
                continue

            interval = self.run_once()
            if max_cycles is not None and self.state.cycles_run >= max_cycles:
                break
            if not self._wait(interval):
                break

        logger.info("Scheduler stopped")

    def run_once(self) -> float:
        """Run one cycle (with provider backoff) and return the next interval in seconds."""
        result = self._trigger_with_backoff()
        self.state.cycles_run += 1

        interval = weighted_interval(self.clock().hour, self.rng, self.settings)
        if result is not None and not result.accepted:
            self.state.consecutive_exhaustions += 1
            self.state.cooling_off = True
            interval = extended_interval(interval, self.settings)
            logger.info(f"Uniqueness exhausted, extending next interval to {interval / 60:.1f} minutes")
        else:
            if result is not None:
                self.state.consecutive_exhaustions = 0
            self.state.cooling_off = False

        self.state.last_interval_seconds = interval
        self.state.next_wake_at = self.clock() + timedelta(seconds=interval)
        logger.info(
            f"Next generation scheduled for {self.state.next_wake_at:%H:%M:%S} "
            f"(in {interval / 60:.1f} minutes)"
        )
        return interval

    def _trigger_with_backoff(self) -> Optional[GenerationCycleResult]:
        for retry_count in range(self.settings.provider_retry_ceiling):
            if self.stopped:
                self.state.last_status = "stopped"
                return None
            try:
                result = self.trigger()
            except ProviderError as e:
                delay = backoff_delay(retry_count, self.settings)
                self.state.last_status = "provider_error"
                logger.warning(
                    f"Provider failure ({retry_count + 1}/{self.settings.provider_retry_ceiling}), "
                    f"backing off {delay:.0f}s: {e}"
                )
                if not self._wait(delay):
                    return None
                continue
            except SynthLeadError as e:
                self.state.last_status = type(e).__name__
                logger.error(f"Generation failed: {e}")
                return None

            self.state.last_status = result.outcome.value
            final = result.final_attempt
            log_cycle_outcome(
                logger,
                result.outcome.value,
                len(result.attempts),
                last_similarity=final.similarity_score if final else None,
                record_id=result.record_id,
            )
            return result

        logger.error(
            f"Giving up cycle after {self.settings.provider_retry_ceiling} provider failures"
        )
        return None

    def _wait(self, seconds: float) -> bool:
        """Sleep unless stopped; False means the scheduler should exit."""
        if self.stopped:
            return False
        if seconds > 0:
            self._sleep(seconds)
        return not self.stopped
