from celery import Celery

from app.config import config

celery_app = Celery("tasks", include=["app.services.email_tasks"])

celery_app.conf.update(
    broker_url=config.CELERY_BROKER_URL,
    result_backend=config.CELERY_RESULT_BACKEND or None,
    task_routes={"app.services.email_tasks.*": {"queue": "default"}},
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    # fire-and-forget: nobody reads the result
    task_ignore_result=True,
    # a publish to an unreachable broker fails instead of blocking the request
    task_publish_retry=False,
)
