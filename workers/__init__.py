# =============================================================================
# workers/ - Background Notification Delivery
# =============================================================================
# celery_app.py builds the app, config.py holds its settings and tasks.py
# defines notify_new_inquiry. The API side only ever calls
# notify_new_inquiry.delay(inquiry.model_dump(mode="json")).
# =============================================================================

from .celery_app import celery_app, healthcheck
from .tasks import notify_new_inquiry

__all__ = ["celery_app", "healthcheck", "notify_new_inquiry"]
