# =============================================================================
# workers/celery_app.py - Notification Worker
# =============================================================================
# The API enqueues inquiry notifications here so a slow mail or Slack call
# never holds up the student's form submission.
#
#   celery -A workers.celery_app worker -Q notifications,default --loglevel=info
#   python -m workers.celery_app
# =============================================================================

import logging

from celery import Celery
from celery.signals import task_failure, task_postrun, task_prerun

from app.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

WORKER_QUEUES = ("notifications", "default")


def broker_host(url: str) -> str:
    """Broker URL without credentials, safe to log."""
    _, _, host = url.rpartition("@")
    return host


def create_celery_app() -> Celery:
    app = Celery("staylo_worker", include=["workers.tasks"])
    app.config_from_object("workers.config:CeleryConfig")
    logger.info(f"Celery configured for broker {broker_host(settings.REDIS_URL)}")
    return app


celery_app = create_celery_app()


@celery_app.task(bind=True, name="workers.healthcheck")
def healthcheck(self):
    """Round-trip task for checking a worker is consuming."""
    return "OK"


# =============================================================================
# Task Lifecycle Logging
# =============================================================================

@task_prerun.connect
def log_task_start(task_id=None, task=None, **_):
    logger.info(f"{task.name} [{task_id}] running")


@task_postrun.connect
def log_task_done(task_id=None, task=None, state=None, **_):
    logger.info(f"{task.name} [{task_id}] finished in state {state}")


@task_failure.connect
def log_task_error(sender=None, task_id=None, exception=None, **_):
    logger.error(f"{sender.name} [{task_id}] raised {exception!r}")


def main():
    """Run a worker on the notification queues."""
    logger.info(f"Starting Staylo worker on {', '.join(WORKER_QUEUES)}")
    celery_app.worker_main(["worker", "--loglevel=info", "-Q", ",".join(WORKER_QUEUES)])


if __name__ == "__main__":
    main()
