"""
CLI entrypoint for the overdue issue alert job. Run from cron, e.g.:

  python -m railcare.alerts

Or hourly: 0 * * * * cd /path/to/railcare && .venv/bin/python -m railcare.alerts
"""

import asyncio
import logging
import sys

from railcare.core.config import get_settings
from railcare.core.database import session_scope
from railcare.services.alerts import run_overdue_alerts

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """E-mail an alert for every issue open longer than ALERT_OVERDUE_HOURS."""
    settings = get_settings()
    try:
        with session_scope() as db:
            results = asyncio.run(run_overdue_alerts(db, settings))
    except Exception as e:
        logger.exception("Overdue alert job failed: %s", e)
        return 1
    failed = sum(1 for r in results if not r.email_sent)
    logger.info("Overdue alerts completed: issues=%s, failed=%s", len(results), failed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
