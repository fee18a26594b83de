# =============================================================================
# core/services/notification_service.py - Email and Slack Notifications
# =============================================================================
# Outbound notifications for new inquiries:
# - Admin email + Slack message when a student submits an inquiry
# - Confirmation email back to the student
#
# Email goes through the Resend HTTP API, Slack through an incoming webhook.
# Both senders report success as a bool and never raise, so a notification
# outage can't fail the request (or task) that triggered it.
# =============================================================================

import logging
from pathlib import Path
from typing import Any

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
REQUEST_TIMEOUT = 10.0

EMAIL_TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "app" / "templates" / "email"

_email_env = Environment(
    loader=FileSystemLoader(str(EMAIL_TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


class NotificationError(ApplicationError):
    """Raised internally when a notification provider rejects a request."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="NOTIFICATION_ERROR",
            details={"provider": provider, "status_code": status_code},
        )


def render_email(template_name: str, **context: Any) -> str:
    """Render one of the templates under app/templates/email/."""
    return _email_env.get_template(template_name).render(app_url=settings.PUBLIC_APP_URL, **context)


def _post(url: str, payload: dict[str, Any], provider: str, headers: dict[str, str] | None = None) -> None:
    """POST JSON and raise NotificationError on transport or HTTP failure."""
    try:
        response = httpx.post(url, json=payload, headers=headers, timeout=REQUEST_TIMEOUT)
    except httpx.HTTPError as e:
        raise NotificationError(provider, str(e))

    if response.is_error:
        raise NotificationError(
            provider,
            f"{provider} API error: {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        )


# =============================================================================
# Senders
# =============================================================================

def send_email(to: str, subject: str, html: str, text: str | None = None) -> bool:
    """
    Send an email through Resend.

    Args:
        to: Recipient address
        subject: Subject line
        html: HTML body
        text: Optional plain-text body

    Returns:
        True if the provider accepted the message, False otherwise
    """
    if not settings.RESEND_API_KEY:
        logger.info(f"[EMAIL] API key not configured, skipping '{subject}' to {to}")
        return False

    payload: dict[str, Any] = {
        "from": settings.EMAIL_FROM,
        "to": [to],
        "subject": subject,
        "html": html,
    }
    if text:
        payload["text"] = text

    try:
        _post(
            RESEND_API_URL,
            payload,
            provider="Resend",
            headers={"Authorization": f"Bearer {settings.RESEND_API_KEY}"},
        )
    except NotificationError as e:
        logger.error(f"Error sending email to {to}: {e}")
        return False

    logger.info(f"[EMAIL] Sent '{subject}' to {to}")
    return True


def send_slack_notification(text: str, blocks: list[dict[str, Any]] | None = None) -> bool:
    """
    Post a message to the configured Slack incoming webhook.

    Returns:
        False when no webhook is configured or the post fails
    """
    if not settings.SLACK_WEBHOOK_URL:
        logger.info("[SLACK] Webhook URL not configured")
        return False

    payload: dict[str, Any] = {"text": text}
    if blocks:
        payload["blocks"] = blocks

    try:
        _post(settings.SLACK_WEBHOOK_URL, payload, provider="Slack")
    except NotificationError as e:
        logger.error(f"Error sending Slack notification: {e}")
        return False

    logger.info("[SLACK] Notification sent successfully")
    return True


# =============================================================================
# Inquiry Notifications
# =============================================================================

def inquiry_slack_blocks(inquiry: dict[str, Any]) -> list[dict[str, Any]]:
    """Slack block layout for a new inquiry."""
    return [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": "🏨 New Student Inquiry"},
        },
        {
            "type": "section",
            "fields": [
                {"type": "mrkdwn", "text": f"*Student:*\n{inquiry.get('student_name', '')}"},
                {"type": "mrkdwn", "text": f"*Email:*\n{inquiry.get('email', '')}"},
                {"type": "mrkdwn", "text": f"*Phone:*\n{inquiry.get('phone', '')}"},
                {"type": "mrkdwn", "text": f"*Hostel:*\n{inquiry.get('hostel_interested', '')}"},
            ],
        },
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"*Message:*\n{inquiry.get('message', '')}"},
        },
        {
            "type": "actions",
            "elements": [
                {
                    "type": "button",
                    "text": {"type": "plain_text", "text": "View in Admin Panel"},
                    "url": f"{settings.PUBLIC_APP_URL}/admin/inquiries",
                    "style": "primary",
                }
            ],
        },
    ]


def send_inquiry_notification(inquiry: dict[str, Any]) -> dict[str, bool]:
    """
    Tell the admin about a new inquiry by email and Slack.

    Args:
        inquiry: Inquiry fields (student_name, email, phone,
            hostel_interested, message)

    Returns:
        Delivery result per channel, e.g. {"email": True, "slack": False}
    """
    html = render_email("inquiry_admin.html", inquiry=inquiry)
    text = render_email("inquiry_admin.txt", inquiry=inquiry)

    emailed = send_email(
        to=settings.ADMIN_EMAIL,
        subject=f"New Inquiry from {inquiry.get('student_name', '')}",
        html=html,
        text=text,
    )
    slacked = send_slack_notification(
        text=f"🆕 New inquiry from *{inquiry.get('student_name', '')}*",
        blocks=inquiry_slack_blocks(inquiry),
    )
    return {"email": emailed, "slack": slacked}


def send_inquiry_confirmation(inquiry: dict[str, Any]) -> bool:
    """Send the student a receipt for their inquiry."""
    html = render_email("inquiry_confirmation.html", inquiry=inquiry)
    return send_email(
        to=inquiry.get("email", ""),
        subject="Your Inquiry Has Been Received - Staylo",
        html=html,
    )
