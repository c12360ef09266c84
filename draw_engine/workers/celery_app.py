from celery import Celery

from draw_engine.core.config import get_settings
from draw_engine.core.logging import configure_logging
from draw_engine.draws.draw_config import DRAW_TIMEZONE

settings = get_settings()
configure_logging(settings.log_level)

celery_app = Celery(
    "draw_engine",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "draw_engine.workers.tasks.draws",
    ],
)

celery_app.conf.update(
    task_default_queue="q_normal",
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone=DRAW_TIMEZONE,
    enable_utc=True,
)


@celery_app.task(name="draw_engine.workers.celery_app.ping")
def ping() -> str:
    return "pong"
