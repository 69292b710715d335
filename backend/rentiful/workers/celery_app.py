# backend/rentiful/workers/celery_app.py
from __future__ import annotations

from celery import Celery

from ..config import settings

celery_app = Celery(
    "rentiful",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["rentiful.workers.geocode_tasks"],
)

celery_app.conf.update(
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_reject_on_worker_lost=True,
    task_track_started=True,
    timezone="UTC",
)

celery_app.conf.task_routes = {
    "rentiful.workers.geocode_tasks.*": {"queue": "geocoding"},
}

# hourly batches; Nominatim allows roughly one request per second
celery_app.conf.beat_schedule = {
    "backfill-sentinel-locations": {
        "task": "rentiful.workers.geocode_tasks.backfill_sentinel_locations",
        "schedule": 3600.0,
    },
}
