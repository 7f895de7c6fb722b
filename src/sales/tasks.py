"""Celery tasks for the sales app."""
from __future__ import annotations

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task
def verify_profit_distribution_task():
    """Nightly integrity sweep over stored profit splits."""
    from sales.services import verify_profit_distribution

    issues = verify_profit_distribution()
    logger.info("Profit distribution verified: %d issue(s)", len(issues))
    return {"issues": len(issues), "sale_ids": sorted({issue.sale_id for issue in issues})}
