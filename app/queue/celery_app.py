"""
Celery application - async task queue with RabbitMQ.
Challenge: Decouple search indexing from HTTP requests; run the expiry sweep on a schedule.
Design: RabbitMQ broker, Redis result backend, beat drives the periodic sweep.
"""

from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    "foodswap",
    broker=settings.celery_broker_url,
    backend=settings.redis_url,
    include=["app.queue.tasks"],
)

# Task settings: retries, time limits, serialization
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=60,
    worker_prefetch_multiplier=1,  # Fair distribution
    timezone="UTC",
    beat_schedule={
        "sweep-expired-food-items": {
            "task": "app.queue.tasks.sweep_expired_items_task",
            "schedule": float(settings.expiry_sweep_interval_seconds),
        },
    },
)
