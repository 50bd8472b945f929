"""
Domain exceptions shared by every ledger service.

Services raise these instead of returning error dictionaries. Each error
carries a machine-readable ``reason`` so API clients can tell the operator
exactly which precondition blocked the operation, plus optional ``details``
(counts, offending ids) for rendering.

The DRF exception handler in core/exception_handler.py maps them to HTTP
responses.
"""

from django.core.exceptions import ValidationError as DjangoValidationError


class Reason:
    """Reason codes carried by ledger exceptions."""

    # Lookups
    NOT_FOUND = 'NOT_FOUND'

    # Period
    PERIOD_CLOSED = 'PERIOD_CLOSED'
    ALREADY_CLOSED = 'ALREADY_CLOSED'
    NO_ACTIVE_PERIOD = 'NO_ACTIVE_PERIOD'

    # Section / batch
    SECTION_NOT_READY = 'SECTION_NOT_READY'
    OPEN_BATCH_EXISTS = 'OPEN_BATCH_EXISTS'
    NO_ACTIVE_BATCH = 'NO_ACTIVE_BATCH'
    BATCH_CLOSED = 'BATCH_CLOSED'
    INVALID_TRANSITION = 'INVALID_TRANSITION'

    # Closing blockers
    ACTIVE_BATCHES = 'ACTIVE_BATCHES'
    INCOMPLETE_CHICK_OUTS = 'INCOMPLETE_CHICK_OUTS'
    NO_COMPLETED_CHICK_OUTS = 'NO_COMPLETED_CHICK_OUTS'
    UNRESOLVED_INCIDENTS = 'UNRESOLVED_INCIDENTS'

    # Chick-outs / reports / incidents / salaries
    ALREADY_COMPLETE = 'ALREADY_COMPLETE'
    DUPLICATE_REPORT = 'DUPLICATE_REPORT'
    EXPENSE_NOT_REQUIRED = 'EXPENSE_NOT_REQUIRED'
    ALREADY_RESOLVED = 'ALREADY_RESOLVED'
    DUPLICATE_SALARY = 'DUPLICATE_SALARY'

    # Input
    INVALID_INPUT = 'INVALID_INPUT'


class LedgerError(Exception):
    """Base class for all ledger errors."""

    default_reason = Reason.INVALID_INPUT

    def __init__(self, message, reason=None, details=None):
        super().__init__(message)
        self.message = message
        self.reason = reason or self.default_reason
        self.details = details or {}

    def as_dict(self):
        return {
            'error': self.message,
            'code': self.reason,
            'details': self.details,
        }


class NotFound(LedgerError):
    """Referenced record does not exist."""

    default_reason = Reason.NOT_FOUND


class InvalidState(LedgerError):
    """Operation violates a lifecycle guard."""

    default_reason = Reason.INVALID_TRANSITION


class ValidationError(LedgerError):
    """Malformed input value, raised before any write happens."""

    default_reason = Reason.INVALID_INPUT


def get_or_not_found(model_class, pk, label=None):
    """
    Fetch a row by primary key or raise NotFound.

    Accepts either a model instance (returned as-is) or a primary key.
    """
    if isinstance(model_class, type) and isinstance(pk, model_class):
        return pk
    try:
        return model_class.objects.get(pk=pk)
    except (model_class.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        name = label or model_class.__name__
        raise NotFound(f"{name} {pk} not found", details={'id': str(pk)})
