"""
Closing guards.

Every check reads the same ledgers the operational services write to.
A guard that fails raises InvalidState naming the blocker and the
offending ids; callers run them in order and stop at the first one.
"""

from django.db.models import Q

from assets.models import TechnicalIncident
from core.exceptions import InvalidState, Reason
from sections.models import Batch, BatchStatus, ChickOut, ChickOutStatus, Section


def assigned_sections(period):
    """Sections linked to the period, currently or historically."""
    return Section.objects.filter(Q(periods=period) | Q(active_period=period)).distinct()


def _ids(queryset):
    return [str(pk) for pk in queryset.values_list('id', flat=True)]


def ensure_no_open_batches(period):
    open_batches = Batch.objects.filter(period=period).exclude(status=BatchStatus.CLOSED)
    count = open_batches.count()
    if count:
        raise InvalidState(
            f"Period has {count} batch(es) that are not closed",
            reason=Reason.ACTIVE_BATCHES,
            details={'count': count, 'batch_ids': _ids(open_batches)},
        )


def ensure_chick_outs_complete(batches):
    incomplete = ChickOut.objects.filter(batch__in=batches, status=ChickOutStatus.INCOMPLETE)
    count = incomplete.count()
    if count:
        raise InvalidState(
            f"{count} chick-out(s) are still INCOMPLETE",
            reason=Reason.INCOMPLETE_CHICK_OUTS,
            details={'count': count, 'chick_out_ids': _ids(incomplete)},
        )


def ensure_incidents_resolved(sections):
    unresolved = TechnicalIncident.objects.filter(section__in=sections).unresolved()
    count = unresolved.count()
    if count:
        raise InvalidState(
            f"{count} technical incident(s) still need a repair expense",
            reason=Reason.UNRESOLVED_INCIDENTS,
            details={'count': count, 'incident_ids': _ids(unresolved)},
        )


def ensure_has_completed_sale(batch):
    if batch.total_chicks_in <= 0:
        return
    if not ChickOut.objects.filter(batch=batch, status=ChickOutStatus.COMPLETE).exists():
        raise InvalidState(
            "Batch has no completed chick-out",
            reason=Reason.NO_COMPLETED_CHICK_OUTS,
            details={'batch_id': str(batch.id)},
        )


def ensure_financials_final(period):
    """P&L is only meaningful once every sale is priced and every repair costed."""
    ensure_chick_outs_complete(Batch.objects.filter(period=period))
    ensure_incidents_resolved(assigned_sections(period))


def count_blockers(period):
    batches = Batch.objects.filter(period=period)
    return {
        'open_batches': batches.exclude(status=BatchStatus.CLOSED).count(),
        'incomplete_chick_outs': ChickOut.objects.filter(
            batch__in=batches, status=ChickOutStatus.INCOMPLETE
        ).count(),
        'unresolved_incidents': TechnicalIncident.objects.filter(
            section__in=assigned_sections(period)
        ).unresolved().count(),
    }
