#!/usr/bin/env python3
"""Run the time-of-day weighted synthetic lead scheduler."""
import argparse
import signal
import sys
from synthlead.config import API_URL, LOG_FILE, LOG_JSON, LOG_LEVEL, SchedulerSettings
from synthlead.scheduler import Scheduler
from synthlead.utils.logging import get_logger, setup_logging

logger = get_logger("run_scheduler")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate synthetic leads on a schedule.")
    parser.add_argument(
        "--remote",
        action="store_true",
        help=f"Trigger cycles through the HTTP API ({API_URL}) instead of in-process.",
    )
    parser.add_argument("--dry-run", action="store_true", help="Generate without saving.")
    return parser.parse_args()


def build_trigger(args: argparse.Namespace):
    if args.remote:
        from synthlead.scheduler.remote import RemoteTrigger

        return RemoteTrigger(dry_run=args.dry_run)

    from synthlead.agents.orchestrator import Orchestrator
    from synthlead.memory.corpus import LeadStore

    store = LeadStore()
    orchestrator = Orchestrator(corpus=store, sink=store)
    return lambda: orchestrator.run_cycle(dry_run=args.dry_run)


def main():
    args = parse_args()
    setup_logging(LOG_LEVEL, json_format=LOG_JSON, log_file=LOG_FILE)

    try:
        trigger = build_trigger(args)
        settings = SchedulerSettings.from_env()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    scheduler = Scheduler(trigger, settings)

    def handle_signal(signum, frame):
        logger.info("Scheduler stopped by user")
        scheduler.stop()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    scheduler.run()


if __name__ == "__main__":
    main()
