#!/usr/bin/env python3
"""
Seed the configured store with demo startups, students and internships.

Usage:
  STORAGE_BACKEND=json STORAGE_PATH=data/storage.json python scripts/seed_mock_data.py
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the internlink package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from internlink.app_factory import create_data_service  # noqa: E402
from internlink.core.config import get_settings  # noqa: E402
from internlink.core.logging_config import configure_logging  # noqa: E402
from internlink.services.seed_service import seed_mock_data  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed demo data into the configured store")
    ap.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    if settings.storage_backend == "memory":
        print("Warning: STORAGE_BACKEND=memory; seeded data disappears when this script exits.")

    service = create_data_service(settings)
    if seed_mock_data(service):
        print("OK: demo data created")
    else:
        print("Demo data already present; nothing to do")
    print(f"  users: {len(service.list_users())}")
    print(f"  internships: {len(service.list_internships())}")
    print(f"  applications: {len(service.list_applications())}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
