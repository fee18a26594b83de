# =============================================================================
# workers/config.py - Celery Settings
# =============================================================================
# Loaded with app.config_from_object("workers.config:CeleryConfig").
# =============================================================================

from kombu import Queue

from app.config import settings


class CeleryConfig:
    """Celery settings for the notification worker."""

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # One reconnect attempt; the API logs and drops enqueue failures
    broker_connection_retry_on_startup = True
    broker_transport_options = {"max_retries": 1}

    task_always_eager = settings.CELERY_TASK_ALWAYS_EAGER

    # Notifications are idempotent enough to redeliver after a crash
    task_acks_late = True
    worker_prefetch_multiplier = 1

    # Each HTTP call inside a task is capped at 10s
    task_soft_time_limit = 45
    task_time_limit = 60

    result_expires = 600

    task_serializer = result_serializer = "json"
    accept_content = ["json"]

    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue("notifications", routing_key="notifications"),
    )
    task_routes = {
        "workers.tasks.notify_new_inquiry": {"queue": "notifications"},
    }

    worker_send_task_events = True
    task_send_sent_event = True

    enable_utc = True
    timezone = "UTC"
