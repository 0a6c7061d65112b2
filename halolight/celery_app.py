from celery import Celery

from halolight.config import get_settings

_settings = get_settings()

celery_app = Celery(
    "halolight",
    broker=_settings.CELERY_BROKER_URL,
    backend=_settings.CELERY_RESULT_BACKEND,
    include=["halolight.auth.tasks"],
)
celery_app.conf.update(
    task_default_queue=_settings.CELERY_TASK_DEFAULT_QUEUE,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    beat_schedule={
        "sweep-expired-refresh-tokens": {
            "task": "halolight.auth.tasks.cleanup_expired_refresh_tokens",
            "schedule": float(_settings.REFRESH_TOKEN_SWEEP_INTERVAL_SECONDS),
        },
    },
)
