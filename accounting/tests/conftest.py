"""
Fixtures for closing and reporting tests: a 1,000-chick batch that is
fully loaded out in one final truck.
"""
from decimal import Decimal

import pytest

from sections.services import BatchService, ChickOutService


@pytest.fixture
def small_batch(section, director, publisher):
    return BatchService(publisher=publisher).create_batch(section, total_chicks_in=1000, created_by=director)


@pytest.fixture
def final_chick_out(small_batch, section, publisher):
    """800 chicks loaded on the final truck, not yet weighed."""
    return ChickOutService(publisher=publisher).create_chick_out(
        section, count=800, vehicle_number='01A777AA', is_final=True,
    )


@pytest.fixture
def sold_batch(small_batch, final_chick_out, director, publisher):
    """6,000 kg at 15,000 per kg with no waste: revenue 90,000,000."""
    ChickOutService(publisher=publisher).complete(
        final_chick_out, Decimal('6000'), Decimal('0'), Decimal('15000'), completed_by=director,
    )
    small_batch.refresh_from_db()
    return small_batch
