"""
Asset & Technical Incident Tests

SCENARIO:
=========
The ventilation motor in Section 1 burns out. The incident needs money to
fix, so it stays unresolved until the repair bill is posted as an
ASSET_REPAIR expense in the section's active period.
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from assets.models import AssetCategory, AssetHistory, AssetStatus, TechnicalIncident
from assets.services import AssetService, IncidentService, RepairExpenseService
from core.exceptions import InvalidState, Reason, ValidationError
from expenses.models import ExpenseCategory, PeriodExpense

pytestmark = pytest.mark.django_db


@pytest.fixture
def motor(section, director):
    return AssetService().create_asset(
        name='Ventilation motor #2',
        category=AssetCategory.MOTOR,
        section=section,
        created_by=director,
    )


@pytest.fixture
def incident(motor, manager, publisher):
    return IncidentService(publisher=publisher).create_incident(
        'Motor burnt out overnight',
        asset=motor,
        requires_expense=True,
        reported_by=manager,
    )


# =============================================================================
# ASSETS
# =============================================================================

class TestAssets:

    def test_new_purchase_posts_expense(self, section, period):
        asset = AssetService().create_asset(
            name='Electricity meter',
            category=AssetCategory.COUNTER,
            section=section,
            is_new_purchase=True,
            purchase_cost='3500000',
        )
        expense = PeriodExpense.objects.get(asset=asset)
        assert asset.purchase_period == period
        assert expense.category == ExpenseCategory.ASSET_PURCHASE
        assert expense.amount == Decimal('3500000.00')

    def test_purchase_without_cost_rejected(self, section):
        with pytest.raises(ValidationError):
            AssetService().create_asset('Generator', AssetCategory.ENGINE, section=section, is_new_purchase=True)

    def test_status_change_is_recorded(self, motor, manager):
        AssetService().update_status(motor, AssetStatus.BROKEN, changed_by=manager)
        history = AssetHistory.objects.get(asset=motor)
        assert history.old_status == AssetStatus.ACTIVE
        assert history.new_status == AssetStatus.BROKEN


# =============================================================================
# INCIDENTS
# =============================================================================

class TestIncidents:

    def test_incident_inherits_asset_section(self, incident, section):
        assert incident.section == section
        assert TechnicalIncident.objects.unresolved().count() == 1

    def test_short_description_rejected(self, motor, publisher):
        with pytest.raises(ValidationError):
            IncidentService(publisher=publisher).create_incident('Bad', asset=motor)

    def test_cost_bearing_incident_cannot_be_resolved_for_free(self, incident, publisher):
        with pytest.raises(InvalidState) as exc_info:
            IncidentService(publisher=publisher).resolve_incident(incident)
        assert exc_info.value.reason == Reason.UNRESOLVED_INCIDENTS

    def test_free_incident_resolves(self, motor, publisher):
        service = IncidentService(publisher=publisher)
        incident = service.create_incident('Loose belt tightened', asset=motor)
        incident = service.resolve_incident(incident)
        assert incident.resolved is True


class TestRepairExpense:

    def test_repair_expense_resolves_incident(self, incident, period, manager, publisher):
        expense, incident = RepairExpenseService(publisher=publisher).create_repair_expense(
            incident, '850000', 'Rewound motor coil', created_by=manager,
        )

        assert expense.category == ExpenseCategory.ASSET_REPAIR
        assert expense.period == period
        assert expense.incident == incident
        assert incident.resolved is True
        assert incident.linked_period == period
        assert TechnicalIncident.objects.unresolved().count() == 0

    def test_second_repair_expense_rejected(self, incident, publisher):
        service = RepairExpenseService(publisher=publisher)
        service.create_repair_expense(incident, '850000', 'Rewound motor coil')
        with pytest.raises(InvalidState) as exc_info:
            service.create_repair_expense(incident, '100', 'Another repair')
        assert exc_info.value.reason == Reason.ALREADY_RESOLVED

    def test_incident_without_cost_rejects_expense(self, motor, publisher):
        incident = IncidentService(publisher=publisher).create_incident('Door squeaks a lot', asset=motor)
        with pytest.raises(InvalidState) as exc_info:
            RepairExpenseService(publisher=publisher).create_repair_expense(incident, '100', 'Oil hinge')
        assert exc_info.value.reason == Reason.EXPENSE_NOT_REQUIRED

    def test_repair_api(self, manager_client, incident):
        response = manager_client.post(
            reverse('assets:incident-repair-expense', args=[incident.id]),
            {'amount': '850000.00', 'description': 'Rewound motor coil'},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert TechnicalIncident.objects.get(pk=incident.pk).resolved is True
