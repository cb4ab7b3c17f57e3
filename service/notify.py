# service/notify.py
from __future__ import annotations

import logging
from typing import Any

import requests

from core import config
from models.submission import Submission

logger = logging.getLogger("notifications")


class NotifyError(Exception):
    """webhook delivery failure"""
    pass


def build_submission_summary(sub: Submission) -> dict[str, Any]:
    return {
        "type": "submission_created",
        "submission_id": sub.id,
        "user_id": sub.user_id,
        "revenue": sub.revenue,
        "cost": sub.cost,
        "profit": sub.profit,
        "marketplace": sub.marketplace,
        "currency": sub.currency,
        "has_product_info": bool(sub.product_name or sub.product_category or sub.product_brand),
        "has_ppc_data": bool(sub.ppc_spend or sub.ppc_sales),
        "has_performance_data": bool(sub.sessions or sub.conversion_rate or sub.bsr),
    }


def post_webhook(url: str, payload: dict[str, Any]) -> None:
    try:
        resp = requests.post(url, json=payload, timeout=config.NOTIFY_TIMEOUT_SECONDS)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise NotifyError(str(e)) from e


def notify_submission_created(sub: Submission) -> None:
    """
    Fire-and-forget after commit: never raises, the submission is already stored.
    """
    summary = build_submission_summary(sub)
    logger.info(
        "new submission: id=%s revenue=%s profit=%s marketplace=%s",
        sub.id,
        sub.revenue,
        sub.profit,
        sub.marketplace,
    )

    url = config.NOTIFY_WEBHOOK_URL
    if not url:
        return
    try:
        post_webhook(url, summary)
    except NotifyError:
        logger.exception(
            "Failed to deliver submission notification",
            extra={"submission_id": sub.id, "user_id": sub.user_id},
        )
