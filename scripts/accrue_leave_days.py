"""Monthly leave accrual, meant to be run by cron on the first day of each month."""
from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from hrm_portal.config import get_settings_module
from hrm_portal.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    updated = container.leave_accrual_service.add_monthly_leave_days()
    print(f"OK: Added leave days to {updated} active users")


if __name__ == "__main__":
    main()
