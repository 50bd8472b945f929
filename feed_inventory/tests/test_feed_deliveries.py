"""
Feed Delivery Tests

SCENARIO:
=========
Two trucks deliver starter and grower feed to Section 1. Each delivery
posts its FEED cost to the section's active period in the same
transaction.

- Starter: 2,500 kg x 6,200 = 15,500,000
- Grower:  4,000 kg x 5,800 = 23,200,000
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from core.exceptions import InvalidState, Reason, ValidationError
from expenses.models import ExpenseCategory, PeriodExpense
from feed_inventory.models import FeedCategory, FeedDelivery
from feed_inventory.services import FeedService
from sections.services import SectionService

pytestmark = pytest.mark.django_db


@pytest.fixture
def feed(publisher):
    return FeedService(publisher=publisher)


class TestRecordDelivery:

    def test_delivery_posts_feed_expense(self, feed, batch, section, period, manager):
        section.refresh_from_db()
        delivery = feed.record_delivery(
            section, '2500', '6200', feed_type=FeedCategory.BROILER_STARTER,
            supplier='Agro Feed LLC', delivered_by=manager,
        )

        assert delivery.total_cost == Decimal('15500000.00')
        assert delivery.period == period
        assert delivery.batch == batch
        assert delivery.expense.category == ExpenseCategory.FEED
        assert delivery.expense.amount == delivery.total_cost
        assert delivery.expense.section == section

    def test_period_totals(self, feed, section, period):
        feed.record_delivery(section, '2500', '6200', feed_type=FeedCategory.BROILER_STARTER)
        feed.record_delivery(section, '4000', '5800', feed_type=FeedCategory.BROILER_GROWER)

        totals = feed.get_period_feed_total(period)
        assert totals['total_kg'] == Decimal('6500.00')
        assert totals['total_cost'] == Decimal('38700000.00')
        assert feed.get_deliveries(period=period).count() == 2

    @pytest.mark.parametrize('quantity, price', [('0', '6200'), ('-5', '6200'), ('100', '-1')])
    def test_invalid_quantities_rejected(self, feed, section, quantity, price):
        with pytest.raises(ValidationError):
            feed.record_delivery(section, quantity, price)
        assert PeriodExpense.objects.count() == 0

    def test_section_without_period_rejected(self, feed, section, publisher):
        SectionService(publisher=publisher).unassign_period(section)
        section.refresh_from_db()
        with pytest.raises(InvalidState) as exc_info:
            feed.record_delivery(section, '100', '6000')
        assert exc_info.value.reason == Reason.NO_ACTIVE_PERIOD
        assert FeedDelivery.objects.count() == 0

    def test_delivery_event_reaches_both_topics(self, feed, section, publisher,
                                                django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            feed.record_delivery(section, '100', '6000')

        topics = {item['topic'] for item in publisher.events if item['event'] == 'feed_delivery_recorded'}
        assert topics == {'system:periods', f'system:section:{section.id}'}


class TestFeedAPI:

    def test_manager_records_delivery(self, manager_client, section):
        response = manager_client.post(reverse('feed_inventory:feed-deliveries'), {
            'section': str(section.id),
            'quantity_kg': '1200.00',
            'unit_price': '6000.00',
            'feed_type': FeedCategory.BROILER_FINISHER,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(response.data['total_cost']) == Decimal('7200000.00')

    def test_worker_can_list_but_not_record(self, worker_client, section, feed):
        feed.record_delivery(section, '100', '6000')

        listing = worker_client.get(reverse('feed_inventory:feed-deliveries'), {'section': str(section.id)})
        create = worker_client.post(reverse('feed_inventory:feed-deliveries'), {
            'section': str(section.id), 'quantity_kg': '1.00', 'unit_price': '1.00',
        }, format='json')

        assert listing.status_code == status.HTTP_200_OK
        assert len(listing.data) == 1
        assert create.status_code == status.HTTP_403_FORBIDDEN
