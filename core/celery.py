"""
Celery app for the farm ledger backend.

The only background work today is realtime event delivery: ledger
services hand events to core.tasks.publish_realtime_event after their
transaction commits, and a worker pushes them to Redis pub/sub.
"""
import os
from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

app = Celery('core')

# CELERY_* keys in Django settings
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

app.conf.update(
    # Events are fire-and-forget; results are never read
    task_ignore_result=True,
    task_time_limit=30,
    task_soft_time_limit=20,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_serializer='json',
    accept_content=['json'],
    timezone='UTC',
    enable_utc=True,
)
