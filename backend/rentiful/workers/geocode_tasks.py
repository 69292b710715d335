# backend/rentiful/workers/geocode_tasks.py
from __future__ import annotations

import logging
from typing import Optional

from ..clients.nominatim import NominatimClient
from ..config import settings
from ..db import SessionLocal
from ..services.locations import backfill_sentinel_coordinates
from .celery_app import celery_app

log = logging.getLogger("rentiful.workers.geocode")


@celery_app.task(name="rentiful.workers.geocode_tasks.backfill_sentinel_locations")
def backfill_sentinel_locations(limit: Optional[int] = None) -> dict:
    """Re-geocode locations stored with the (0, 0) sentinel. Safe to run repeatedly."""
    db = SessionLocal()
    try:
        out = backfill_sentinel_coordinates(
            db,
            NominatimClient(),
            limit=int(limit or settings.geocode_backfill_batch_size),
        )
        log.info("sentinel backfill: scanned=%s updated=%s", out["scanned"], out["updated"])
        return out
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
