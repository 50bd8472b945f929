"""
Role-based permissions for ledger endpoints.
"""

from rest_framework import permissions


class IsDirector(permissions.BasePermission):
    """
    Directors open and close periods and set forecast prices.
    """
    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == 'DIRECTOR'
        )


class IsManagerOrDirector(permissions.BasePermission):
    """
    Managers run sections: batches, chick-outs, expenses.
    """
    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role in ['DIRECTOR', 'MANAGER']
        )


class ReadOnlyOrManager(permissions.BasePermission):
    """
    Any authenticated user may read; writes need a manager or director.
    """
    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.role in ['DIRECTOR', 'MANAGER']
