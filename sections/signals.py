"""
Signals raised by the section ledger.

chick_out_completed(sender=ChickOut, chick_out=..., actor=...)
    Sent inside the completing transaction after a chick-out becomes
    COMPLETE. The forecasts app listens to refresh its last-real-sale price.
"""

from django.dispatch import Signal

chick_out_completed = Signal()
