#!/usr/bin/env python3
"""Release elapsed holds and auto-complete finished appointments, once or on an interval."""

from __future__ import annotations

import argparse
import logging
import sys
import time

sys.path.insert(0, ".")

from consult_scheduling.wiring.dependencies import get_appointments_use_case, get_booking_hold_use_case


def run_once() -> tuple[int, int]:
    expired = get_booking_hold_use_case().expire_stale_holds()
    completed = get_appointments_use_case().complete_past_appointments()
    return expired, completed


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--interval", type=int, default=0, help="Repeat every N seconds (0 = run once)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    logger = logging.getLogger("sweep_expired")

    while True:
        expired, completed = run_once()
        logger.info("Sweep finished: %s holds expired, %s appointments completed", expired, completed)
        if args.interval <= 0:
            break
        time.sleep(args.interval)


if __name__ == "__main__":
    main()
