# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Tasks:
# - notify_new_inquiry: Admin email + Slack, then student confirmation
# =============================================================================

import logging
from typing import Any

from celery import shared_task

from core.services.notification_service import (
    send_inquiry_confirmation,
    send_inquiry_notification,
)

logger = logging.getLogger(__name__)


@shared_task(bind=True, name="workers.tasks.notify_new_inquiry")
def notify_new_inquiry(self, inquiry: dict[str, Any]) -> dict[str, bool]:
    """
    Deliver all notifications for a newly submitted inquiry.

    Senders never raise, so the task always completes; the return value
    records which channels went through.

    Args:
        inquiry: JSON-serialized Inquiry

    Returns:
        Dict like {"email": True, "slack": False, "confirmation": True}
    """
    inquiry_id = inquiry.get("id", "unknown")
    logger.info(f"Sending notifications for inquiry {inquiry_id}")

    result = send_inquiry_notification(inquiry)
    result["confirmation"] = send_inquiry_confirmation(inquiry)

    logger.info(f"Notifications for inquiry {inquiry_id}: {result}")
    return result
