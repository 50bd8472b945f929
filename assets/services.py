"""
Asset, Incident & Repair Expense Services

A broken motor that needs money to fix is reported as an incident with
``requires_expense=True``. Until ``RepairExpenseService.create_repair_expense``
posts the ASSET_REPAIR cost, the incident counts as unresolved and the
closing guards refuse to shut the batch or period.
"""

from decimal import Decimal
import logging

from django.db import transaction

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import SYSTEM_PERIODS_TOPIC, get_event_publisher, system_section_topic
from assets.models import Asset, AssetHistory, AssetStatus, TechnicalIncident
from expenses.models import ExpenseCategory
from expenses.services import PeriodExpenseService
from periods.models import Period, PeriodStatus

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LENGTH = 5


def _clean_description(description):
    description = (description or '').strip()
    if len(description) < MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters",
            details={'description': description},
        )
    return description


def _active_period(period, label):
    period = get_or_not_found(Period, period)
    if period.status != PeriodStatus.ACTIVE:
        raise InvalidState(
            f"Cannot add {label} to closed period {period.name}",
            reason=Reason.PERIOD_CLOSED,
            details={'period_id': str(period.id)},
        )
    return period


class AssetService:

    def __init__(self, expenses=None):
        self.expenses = expenses or PeriodExpenseService()

    @transaction.atomic
    def create_asset(self, name, category, section=None, is_new_purchase=False,
                     purchase_cost=None, period=None, created_by=None):
        """
        Register equipment. A new purchase posts an ASSET_PURCHASE expense to
        the section's active period (or the given period for unplaced assets)
        in the same transaction.
        """
        if is_new_purchase and (purchase_cost is None or Decimal(str(purchase_cost)) <= 0):
            raise ValidationError("purchase_cost must be greater than zero for new purchases")
        if not is_new_purchase and purchase_cost:
            raise ValidationError("purchase_cost is only allowed for new purchases")

        purchase_period = None
        if is_new_purchase:
            if section is not None:
                # No active period means nothing to post against
                if section.active_period and section.active_period.status == PeriodStatus.ACTIVE:
                    purchase_period = section.active_period
            else:
                if period is None:
                    raise ValidationError("period is required for new purchases without a section")
                purchase_period = _active_period(period, 'asset purchase')

        asset = Asset.objects.create(
            name=name,
            category=category,
            section=section,
            is_new_purchase=is_new_purchase,
            purchase_cost=purchase_cost if is_new_purchase else None,
            purchase_period=purchase_period,
            status=AssetStatus.ACTIVE,
            created_by=created_by,
        )

        if purchase_period is not None:
            self.expenses.add_expense(
                period=purchase_period,
                category=ExpenseCategory.ASSET_PURCHASE,
                amount=purchase_cost,
                description=f"Asset purchase: {name}",
                section=section,
                asset=asset,
                created_by=created_by,
            )

        logger.info(f"Asset registered: {asset.name}")
        return asset

    @transaction.atomic
    def update_status(self, asset, new_status, changed_by=None):
        asset = get_or_not_found(Asset, asset)
        if new_status not in AssetStatus.values:
            raise ValidationError(f"Unknown asset status: {new_status}")
        if asset.status == new_status:
            return asset

        AssetHistory.objects.create(
            asset=asset,
            old_status=asset.status,
            new_status=new_status,
            changed_by=changed_by,
        )
        asset.status = new_status
        asset.save(update_fields=['status', 'updated_at'])
        return asset


class IncidentService:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()

    @transaction.atomic
    def create_incident(self, description, asset=None, section=None, requires_expense=False,
                        reported_by=None, linked_period=None):
        """Report a breakdown. The section defaults to the asset's section."""
        description = _clean_description(description)
        if asset is not None:
            asset = get_or_not_found(Asset, asset)
            section = section or asset.section
        if asset is None and section is None:
            raise ValidationError("An incident needs an asset or a section")

        incident = TechnicalIncident.objects.create(
            asset=asset,
            section=section,
            reported_by=reported_by,
            description=description,
            requires_expense=bool(requires_expense),
            linked_period=linked_period,
        )

        logger.info(f"Incident {incident.id} reported (requires_expense={incident.requires_expense})")
        if section is not None:
            self.publisher.publish(system_section_topic(section.id), 'incident_reported', {
                'incident_id': incident.id,
                'section_id': section.id,
                'requires_expense': incident.requires_expense,
            })
        return incident

    @transaction.atomic
    def resolve_incident(self, incident):
        """
        Mark an incident fixed without cost. Cost-bearing incidents are
        resolved by posting their repair expense instead.
        """
        incident = get_or_not_found(TechnicalIncident, incident)
        if incident.requires_expense:
            raise InvalidState(
                "This incident requires a repair expense to be resolved",
                reason=Reason.UNRESOLVED_INCIDENTS,
                details={'incident_id': str(incident.id)},
            )
        incident.resolved = True
        incident.save(update_fields=['resolved', 'updated_at'])
        return incident


class RepairExpenseService:

    def __init__(self, expenses=None, publisher=None):
        self.publisher = publisher or get_event_publisher()
        self.expenses = expenses or PeriodExpenseService(publisher=self.publisher)

    @transaction.atomic
    def create_repair_expense(self, incident, amount, description, period=None, created_by=None):
        """
        Price a cost-bearing incident.

        The period is the section's active period; incidents without a
        section must name one explicitly.

        Returns:
            (expense, incident)
        """
        incident = get_or_not_found(TechnicalIncident, incident)
        incident = TechnicalIncident.objects.select_for_update().get(pk=incident.pk)

        if not incident.requires_expense:
            raise InvalidState(
                "This incident does not require an expense",
                reason=Reason.EXPENSE_NOT_REQUIRED,
                details={'incident_id': str(incident.id)},
            )
        if incident.expenses.exists():
            raise InvalidState(
                "This incident already has an expense attached",
                reason=Reason.ALREADY_RESOLVED,
                details={'incident_id': str(incident.id)},
            )
        if amount is None or Decimal(str(amount)) <= 0:
            raise ValidationError("Amount must be a positive number", details={'amount': str(amount)})
        description = _clean_description(description)

        section = incident.section
        if section is not None:
            if section.active_period is None:
                raise InvalidState(
                    f"No active period assigned to section {section.name}",
                    reason=Reason.NO_ACTIVE_PERIOD,
                    details={'section_id': str(section.id)},
                )
            target_period = _active_period(section.active_period, 'repair expense')
        else:
            if period is None:
                raise ValidationError("period is required for incidents without a section")
            target_period = _active_period(period, 'repair expense')

        expense = self.expenses.add_expense(
            period=target_period,
            category=ExpenseCategory.ASSET_REPAIR,
            amount=amount,
            description=description,
            section=section,
            incident=incident,
            asset=incident.asset,
            created_by=created_by,
        )

        incident.resolved = True
        incident.linked_period = target_period
        incident.save(update_fields=['resolved', 'linked_period', 'updated_at'])

        logger.info(f"Incident {incident.id} resolved with repair expense {expense.id}")
        payload = {'incident_id': incident.id, 'expense_id': expense.id, 'amount': expense.amount}
        self.publisher.publish(SYSTEM_PERIODS_TOPIC, 'incident_resolved', payload)
        return expense, incident
