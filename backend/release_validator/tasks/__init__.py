"""
Celery application factory.

Worker startup configures logging and tracing and refuses to start when
a required credential is missing.
"""

from celery import Celery
from celery.signals import worker_init

from release_validator.core.config import settings, validate_startup
from release_validator.core.logging import get_logger, setup_logging
from release_validator.core.tracing import setup_tracing

celery_app = Celery("release_validator")
celery_app.config_from_object("celeryconfig")

celery_app.autodiscover_tasks([
    "release_validator.tasks.pipeline_tasks",
])


@worker_init.connect
def _on_worker_init(**kwargs) -> None:
    setup_logging("DEBUG" if settings.APP_ENV == "development" else "INFO")
    setup_tracing()
    validate_startup(settings)
    get_logger("startup").info("Celery worker ready", env=settings.APP_ENV)
