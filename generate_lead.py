#!/usr/bin/env python3
"""Run a single generation cycle from the command line."""
import argparse
import sys
from synthlead.agents.orchestrator import Orchestrator
from synthlead.config import LOG_FILE, LOG_JSON, LOG_LEVEL
from synthlead.errors import SynthLeadError
from synthlead.memory.corpus import LeadStore
from synthlead.utils.logging import setup_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate one synthetic lead.")
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Save the lead to the database (default is a dry run).",
    )
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging(LOG_LEVEL, json_format=LOG_JSON, log_file=LOG_FILE)

    store = LeadStore()
    try:
        orchestrator = Orchestrator(corpus=store, sink=store)
        result = orchestrator.run_cycle(dry_run=not args.commit).raise_for_outcome()
    except ValueError as e:
        print(f"❌ Configuration error: {e}")
        sys.exit(1)
    except SynthLeadError as e:
        print(f"❌ Generation failed: {e}")
        sys.exit(1)

    record = result.record
    print()
    print("✨ Generated Synthetic Lead:")
    print(f"   Name: {record.full_name}")
    print(f"   Email: {record.email}")
    print(f"   Type: {record.category.value}")
    print(f"   Comment: \"{record.text}\"")
    print(f"   Length: {len(record.text.split())} words ({len(record.text)} chars)")
    print(f"   Attempts: {len(result.attempts)}")
    if result.record_id is not None:
        print(f"   Saved as lead #{result.record_id}")


if __name__ == "__main__":
    main()
