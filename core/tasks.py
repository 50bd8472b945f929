"""
Core Celery tasks.

Realtime delivery runs here so API requests never block on Redis.
"""
import json
import logging

import redis
from celery import shared_task
from django.conf import settings

logger = logging.getLogger(__name__)


def get_redis_client():
    return redis.Redis.from_url(settings.REALTIME_REDIS_URL)


@shared_task(bind=True, max_retries=3)
def publish_realtime_event(self, topic: str, event: str, payload: dict):
    """
    Publish a ledger event to Redis pub/sub.

    The websocket gateway subscribes to ``<prefix>:<topic>`` channels and
    forwards messages to connected clients.

    Usage:
        from core.tasks import publish_realtime_event
        publish_realtime_event.delay('section:<id>', 'batch_started', {...})
    """
    channel = f"{settings.REALTIME_CHANNEL_PREFIX}:{topic}"
    message = json.dumps({'event': event, 'payload': payload})
    try:
        receivers = get_redis_client().publish(channel, message)
        logger.debug(f"Published {event} to {channel} ({receivers} receivers)")
        return receivers
    except redis.RedisError as exc:
        if self.request.retries >= self.max_retries:
            logger.error(f"Giving up on {event} for {channel}: {exc}")
        else:
            logger.warning(f"Publishing {event} to {channel} failed: {exc}")
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)
