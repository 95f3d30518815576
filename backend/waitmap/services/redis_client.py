import redis
import json
import logging
import os
from typing import Dict, Iterable, Optional

logger = logging.getLogger(__name__)

REDIS_URL = os.getenv("REDIS_URL")
AGGREGATE_CACHE_TTL = int(os.getenv("AGGREGATE_CACHE_TTL", "300"))
AGGREGATE_KEY_PREFIX = "aggregated_wait:"

r = redis.Redis.from_url(REDIS_URL, decode_responses=True) if REDIS_URL else None


def aggregate_key(hospital_id: int) -> str:
    return f"{AGGREGATE_KEY_PREFIX}{hospital_id}"


def set_aggregated_waits(data: Dict[int, dict], expire_sec: int = AGGREGATE_CACHE_TTL):
    """Save one aggregate per hospital, each with its own TTL (default 5 minutes)."""
    if r is None:
        return
    try:
        for hospital_id, aggregated in data.items():
            r.set(aggregate_key(hospital_id), json.dumps(aggregated), ex=expire_sec)
    except redis.exceptions.RedisError as e:
        logger.warning(f"⚠️ Could not cache aggregates: {e}")


def get_aggregated_waits(hospital_ids: Iterable[int]) -> Dict[int, dict]:
    """Cached aggregates for the given hospitals; misses are left out."""
    if r is None:
        return {}
    cached = {}
    try:
        for hospital_id in hospital_ids:
            data = r.get(aggregate_key(hospital_id))
            if data:
                cached[hospital_id] = json.loads(data)
    except redis.exceptions.RedisError as e:
        logger.warning(f"⚠️ Redis unavailable, recomputing aggregates: {e}")
        return {}
    return cached


def invalidate_aggregated_waits(hospital_ids: Optional[Iterable[int]] = None):
    """Drop cached aggregates for the given hospitals, or all of them."""
    if r is None:
        return
    try:
        if hospital_ids is None:
            keys = r.keys(f"{AGGREGATE_KEY_PREFIX}*")
        else:
            keys = [aggregate_key(hid) for hid in hospital_ids]
        if keys:
            r.delete(*keys)
    except redis.exceptions.RedisError as e:
        logger.warning(f"⚠️ Could not invalidate aggregate cache: {e}")
