#!/usr/bin/env python3
"""
Seed Script for BearWatch Demo Data

Appends reproducible demonstration detections to the detection store so the
dashboard has something to show before real field uploads arrive. Demo
events are written through the regular store and look like any other
detection; use a separate OUTPUT_DIR for demos.

Usage:
    python scripts/seed_demo_data.py                # Seed 7 days, 4 per day
    python scripts/seed_demo_data.py --days 14 -p 6 # More history
    python scripts/seed_demo_data.py --dry-run      # Show what would be created

Output:
    - OUTPUT_DIR/DB_FILENAME (SQLite database, see config.py)
"""

import argparse
import random
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from detectors.interfaces import PendingDetection, Verdict  # noqa: E402
from detectors.services import PersistenceService  # noqa: E402


# =============================================================================
# Configuration
# =============================================================================

DEMO_CONFIG = {
    "days_back": 7,
    "per_day": 4,
    "seed": 42,

    # Location distribution (name: weight)
    "locations": {
        "台東縣海端鄉": 0.35,
        "台東縣延平鄉": 0.25,
        "台東縣卑南鄉": 0.20,
        "花蓮縣卓溪鄉": 0.12,
        "南投縣信義鄉": 0.08,
    },

    "bear_ratio": 0.4,
    "bear_confidence": (0.70, 0.98),
    "empty_confidence": (0.02, 0.45),
    "model_id": "demo-seed",
}


def weighted_choice(rng: random.Random, options: dict) -> str:
    names = list(options)
    return rng.choices(names, weights=[options[n] for n in names], k=1)[0]


def generate_demo_detections(
    now: datetime,
    days: int = DEMO_CONFIG["days_back"],
    per_day: int = DEMO_CONFIG["per_day"],
) -> list[PendingDetection]:
    """Builds days * per_day demo detections, oldest first."""
    rng = random.Random(DEMO_CONFIG["seed"])
    pending = []
    for day in range(days, 0, -1):
        for _ in range(per_day):
            detected_at = now - timedelta(
                days=day - 1, hours=rng.randint(0, 23), minutes=rng.randint(0, 59)
            )
            bear = rng.random() < DEMO_CONFIG["bear_ratio"]
            low, high = (
                DEMO_CONFIG["bear_confidence"]
                if bear
                else DEMO_CONFIG["empty_confidence"]
            )
            pending.append(
                PendingDetection(
                    location=weighted_choice(rng, DEMO_CONFIG["locations"]),
                    detected_at=detected_at,
                    verdict=Verdict(
                        bear_detected=bear,
                        confidence=round(rng.uniform(low, high), 2),
                        model_id=DEMO_CONFIG["model_id"],
                    ),
                )
            )
    pending.sort(key=lambda p: p.detected_at)
    return pending


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Append demo detections to the BearWatch detection store"
    )
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Show what would be created without writing to the store"
    )
    parser.add_argument(
        "--days", "-d",
        type=int,
        default=DEMO_CONFIG["days_back"],
        help=f"Number of days to generate (default: {DEMO_CONFIG['days_back']})"
    )
    parser.add_argument(
        "--per-day", "-p",
        type=int,
        default=DEMO_CONFIG["per_day"],
        help=f"Detections per day (default: {DEMO_CONFIG['per_day']})"
    )

    args = parser.parse_args(argv)
    if args.days <= 0 or args.per_day <= 0:
        parser.error("--days and --per-day must be positive")

    print("=" * 60)
    print("BearWatch Demo Data Seed Script")
    print("=" * 60)
    print(f"Days to generate: {args.days}")
    print(f"Detections per day: {args.per_day}")
    print(f"Mode: {'DRY RUN' if args.dry_run else 'LIVE'}")
    print("=" * 60)

    detections = generate_demo_detections(
        datetime.now(UTC), days=args.days, per_day=args.per_day
    )

    if args.dry_run:
        for p in detections:
            print(
                f"  {p.detected_at.isoformat()}  {p.location}  "
                f"bear={p.verdict.bear_detected}  conf={p.verdict.confidence:.2f}"
            )
        print(f"\nWould append {len(detections)} detections")
        return 0

    store = PersistenceService()
    for p in detections:
        store.append(p)

    bears = sum(1 for p in detections if p.verdict.bear_detected)
    print(f"\nAppended {len(detections)} detections ({bears} with a bear)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
