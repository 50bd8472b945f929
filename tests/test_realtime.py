"""
Realtime Delivery Tests

Events are delivered only after the surrounding transaction commits, and
a broken transport never breaks the write that produced the event.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch
import json
import uuid

import pytest
import redis
from celery.exceptions import Retry
from django.db import transaction

from core.realtime import (
    CeleryEventPublisher, EventPublisher, InMemoryEventPublisher, get_event_publisher, section_topic,
    system_section_topic, to_json_payload,
)
from core.tasks import publish_realtime_event
from periods.models import Period


class ExplodingPublisher(EventPublisher):

    def send(self, topic, event, payload):
        raise ConnectionError('gateway down')


class TestTopics:

    def test_topic_names(self):
        section_id = uuid.UUID('11111111-1111-1111-1111-111111111111')
        assert section_topic(section_id) == 'section:11111111-1111-1111-1111-111111111111'
        assert system_section_topic(section_id) == 'system:section:11111111-1111-1111-1111-111111111111'

    def test_payload_is_json_safe(self):
        payload = to_json_payload({'amount': Decimal('12.50'), 'id': uuid.UUID(int=1)})
        assert payload == {'amount': '12.50', 'id': '00000000-0000-0000-0000-000000000001'}


@pytest.mark.django_db
class TestPublishing:

    def test_delivery_waits_for_commit(self, django_capture_on_commit_callbacks):
        publisher = InMemoryEventPublisher()
        with django_capture_on_commit_callbacks() as callbacks:
            publisher.publish('system:periods', 'period_created', {'name': 'Spring'})
            assert publisher.events == []

        assert len(callbacks) == 1
        callbacks[0]()
        assert publisher.kinds() == ['period_created']

    def test_rolled_back_write_publishes_nothing(self, django_capture_on_commit_callbacks):
        publisher = InMemoryEventPublisher()
        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    publisher.publish('system:periods', 'period_created', {})
                    raise RuntimeError('boom')
        assert publisher.events == []

    def test_transport_failure_is_swallowed(self, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            ExplodingPublisher().publish('system:periods', 'period_closed', {})

    def test_unserializable_payload_does_not_break_the_write(self, django_capture_on_commit_callbacks):
        publisher = InMemoryEventPublisher()
        with django_capture_on_commit_callbacks(execute=True):
            with transaction.atomic():
                period = Period.objects.create(name='Spring', start_date=date(2026, 3, 1))
                publisher.publish('system:periods', 'period_created', {'blob': object()})

        assert Period.objects.filter(pk=period.pk).exists()
        assert publisher.events == []

    def test_celery_publisher_queues_task(self, django_capture_on_commit_callbacks):
        with patch('core.tasks.publish_realtime_event.delay') as delay:
            with django_capture_on_commit_callbacks(execute=True):
                CeleryEventPublisher().publish('system:periods', 'period_closed', {'name': 'Spring'})
        delay.assert_called_once_with('system:periods', 'period_closed', {'name': 'Spring'})

    def test_configured_publisher_is_shared(self, settings):
        settings.REALTIME_EVENT_PUBLISHER = 'core.realtime.InMemoryEventPublisher'
        assert get_event_publisher() is get_event_publisher()
        assert isinstance(get_event_publisher(), InMemoryEventPublisher)


class TestRedisTask:

    def test_event_is_published_to_prefixed_channel(self, settings):
        settings.REALTIME_CHANNEL_PREFIX = 'farm'
        client = MagicMock()
        client.publish.return_value = 2

        with patch('core.tasks.get_redis_client', return_value=client):
            receivers = publish_realtime_event('section:abc', 'batch_started', {'count': 1})

        assert receivers == 2
        channel, message = client.publish.call_args[0]
        assert channel == 'farm:section:abc'
        assert json.loads(message) == {'event': 'batch_started', 'payload': {'count': 1}}

    def test_redis_error_is_retried(self):
        client = MagicMock()
        client.publish.side_effect = redis.ConnectionError('refused')

        with patch('core.tasks.get_redis_client', return_value=client), \
                patch('celery.app.task.Task.retry', side_effect=Retry()) as retry:
            with pytest.raises(Retry):
                publish_realtime_event('section:abc', 'batch_started', {})

        assert retry.call_args.kwargs['countdown'] == 1
        assert isinstance(retry.call_args.kwargs['exc'], redis.ConnectionError)
