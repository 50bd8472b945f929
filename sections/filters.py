"""
Query filters for the batch and chick-out lists.

Malformed values (a section id that is not a UUID, an unknown status)
are rejected with 400 by DjangoFilterBackend.
"""

import django_filters

from .models import Batch, BatchStatus, ChickOut, ChickOutStatus


class BatchFilter(django_filters.FilterSet):
    section = django_filters.UUIDFilter(field_name='section_id')
    period = django_filters.UUIDFilter(field_name='period_id')
    status = django_filters.ChoiceFilter(choices=BatchStatus.choices)

    class Meta:
        model = Batch
        fields = ['section', 'period', 'status']


class ChickOutFilter(django_filters.FilterSet):
    section = django_filters.UUIDFilter(field_name='section_id')
    batch = django_filters.UUIDFilter(field_name='batch_id')
    status = django_filters.ChoiceFilter(choices=ChickOutStatus.choices)
    is_final = django_filters.BooleanFilter()

    class Meta:
        model = ChickOut
        fields = ['section', 'batch', 'status', 'is_final']
