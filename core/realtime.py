"""
Realtime event publishing.

Services announce state changes through an ``EventPublisher``:

    publisher = get_event_publisher()
    publisher.publish(section_topic(section.id), 'batch_started', {...})

Delivery is scheduled with ``transaction.on_commit`` so subscribers never
see a change that was rolled back. Delivery is fire-and-forget: a failure
is logged and never propagates into the write that triggered it.

The concrete publisher is chosen by the REALTIME_EVENT_PUBLISHER setting.
"""

import json
import logging
from functools import partial

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


# =============================================================================
# TOPICS
# =============================================================================

SYSTEM_PERIODS_TOPIC = 'system:periods'


def section_topic(section_id):
    """Channel watched by workers assigned to a section."""
    return f'section:{section_id}'


def system_section_topic(section_id):
    """Channel watched by directors and managers for a section."""
    return f'system:section:{section_id}'


def to_json_payload(payload):
    """Convert Decimals, UUIDs and dates into JSON-safe primitives."""
    return json.loads(json.dumps(payload, cls=DjangoJSONEncoder))


# =============================================================================
# PUBLISHERS
# =============================================================================

class EventPublisher:
    """
    Base publisher. Subclasses implement ``send``.
    """

    def publish(self, topic, event, payload=None):
        transaction.on_commit(partial(self._safe_send, topic, event, dict(payload or {})))

    def _safe_send(self, topic, event, payload):
        try:
            self.send(topic, event, to_json_payload(payload))
        except Exception as exc:
            logger.warning(f"Failed to deliver event {event} to {topic}: {exc}")

    def send(self, topic, event, payload):
        raise NotImplementedError


class CeleryEventPublisher(EventPublisher):
    """Queues delivery to Redis pub/sub on the Celery worker."""

    def send(self, topic, event, payload):
        from core.tasks import publish_realtime_event
        publish_realtime_event.delay(topic, event, payload)


class InMemoryEventPublisher(EventPublisher):
    """Keeps delivered events in memory. Used by the test settings."""

    def __init__(self):
        self.events = []

    def send(self, topic, event, payload):
        self.events.append({'topic': topic, 'event': event, 'payload': payload})

    def kinds(self):
        return [item['event'] for item in self.events]

    def clear(self):
        self.events = []


_publishers = {}


def get_event_publisher():
    """Return the configured publisher, one shared instance per class path."""
    path = getattr(
        settings, 'REALTIME_EVENT_PUBLISHER', 'core.realtime.CeleryEventPublisher'
    )
    if path not in _publishers:
        _publishers[path] = import_string(path)()
    return _publishers[path]
