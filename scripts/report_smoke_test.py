#!/usr/bin/env python3
"""Run a quick billing report smoke test against the local FastAPI service."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict

from fastapi.testclient import TestClient

from app.config import get_settings
from app.dependencies.services import get_pos_client_cached
from app.main import app


def run_smoke_test(period: str, category: str, show_csv: bool) -> Dict[str, Any]:
    """Generate a report through the HTTP routes and print the highlights."""

    # Ensure configuration changes are respected between runs.
    get_settings.cache_clear()
    get_pos_client_cached.cache_clear()

    settings = get_settings()
    source = "mock store" if settings.use_mock_data else settings.pos_api_base_url
    print(f"Running {period}/{category} report against {source}")

    body = {"period": period, "category": category}
    with TestClient(app) as client:
        response = client.post("/tools/reports/billing", json=body)
        if response.status_code != 200:
            raise RuntimeError(
                f"Report generation failed ({response.status_code}): {response.text}"
            )
        csv_response = client.post("/tools/reports/billing/csv", json=body) if show_csv else None

    payload: Dict[str, Any] = response.json()
    print(f"Date range: {payload['dateRangeLabel']}")
    print(f"Rows: {len(payload['rows'])}")
    print("Totals:")
    print(json.dumps(payload["totals"], indent=2, ensure_ascii=False))
    print("Summary:")
    print(json.dumps(payload["summary"], indent=2, ensure_ascii=False))

    if csv_response is not None:
        print("\nCSV export:")
        print(csv_response.text)

    return payload


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate a billing report through the local service and print it."
    )
    parser.add_argument(
        "--period",
        default="today",
        choices=["today", "weekly", "monthly", "yearly", "all"],
        help="Report period to request.",
    )
    parser.add_argument(
        "--category",
        default="all",
        choices=["all", "kitchen", "bar"],
        help="Which items to include.",
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Also print the CSV export.",
    )

    args = parser.parse_args(argv)

    try:
        run_smoke_test(args.period, args.category, args.csv)
    except Exception as exc:  # pragma: no cover - manual diagnostic utility
        print(f"Smoke test failed: {exc}", file=sys.stderr)
        return 1

    print("\nSmoke test completed successfully.")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual diagnostic utility
    raise SystemExit(main())
