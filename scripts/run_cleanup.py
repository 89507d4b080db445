#!/usr/bin/env python3
"""
Run the retention cleanup against the configured store.

Usage:
  python scripts/run_cleanup.py [--force]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the internlink package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from internlink.app_factory import build_store  # noqa: E402
from internlink.core.config import get_settings  # noqa: E402
from internlink.core.logging_config import configure_logging  # noqa: E402
from internlink.services.retention_service import RetentionSweeper  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Remove closed internships past retention")
    ap.add_argument("--force", action="store_true", help="Sweep even if the interval has not elapsed")
    args = ap.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    store = build_store(settings)
    store.initialize()
    sweeper = RetentionSweeper(store, settings=settings)

    if not args.force and not sweeper.is_due():
        last = sweeper.last_cleanup()
        print(f"Cleanup not due (last run {last.isoformat() if last else 'never'})")
        return

    result = sweeper.sweep()
    print("OK: cleanup finished")
    print(f"  internships removed: {len(result.removed_internship_ids)} (kept {result.kept_internships})")
    print(f"  applications removed: {len(result.removed_application_ids)} (kept {result.kept_applications})")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
