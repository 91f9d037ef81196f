#!/usr/bin/env python3
"""Smoke test for a running scheduling API: list slots, hold one, confirm it."""

import sys
from datetime import date, timedelta

import httpx


BASE_URL = "http://127.0.0.1:8001"


def next_weekday() -> date:
    day = date.today() + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def main() -> int:
    day = next_weekday().isoformat()
    consultant_id = "smoke-consultant"

    try:
        response = httpx.get(
            f"{BASE_URL}/api/v1/consultants/{consultant_id}/slots",
            params={"date": day},
            timeout=10.0,
        )
        response.raise_for_status()
        slots = response.json()["slots"]
        print(f"{len(slots)} slots on {day}: {', '.join(slots)}")
        if not slots:
            print("Nothing to book")
            return 1

        response = httpx.post(
            f"{BASE_URL}/api/v1/holds",
            json={"consultant_id": consultant_id, "client_id": "smoke-client", "date": day, "slot": slots[0]},
            timeout=10.0,
        )
        response.raise_for_status()
        hold = response.json()
        print(f"Held {hold['slot']} until {hold['expires_at']} (hold {hold['hold_id']})")

        response = httpx.post(
            f"{BASE_URL}/api/v1/holds/{hold['hold_id']}/confirm",
            json={"payment_reference": "smoke-payment"},
            timeout=10.0,
        )
        response.raise_for_status()
        print(f"Confirmed, appointment {response.json()['appointment_id']}")
        return 0
    except httpx.HTTPStatusError as e:
        print(f"HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return 1
    except httpx.RequestError as e:
        print(f"Request failed: {e}")
        print("Is the server running? Start it with: uvicorn consult_scheduling.main:app --reload --port 8001")
        return 1


if __name__ == "__main__":
    sys.exit(main())
