"""
Domain exceptions for plans app.

Plan lookup and capability checks are consumed by other apps (expenses),
so these are DRF APIExceptions that map straight to HTTP responses.
"""
from rest_framework.exceptions import APIException


class PlanNotFoundError(APIException):
    """Travel plan not found."""
    status_code = 404
    default_detail = 'Travel plan not found.'
    default_code = 'plan_not_found'


class CapabilityDeniedError(APIException):
    """User's trip role does not grant the requested capability."""
    status_code = 403
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'capability_denied'
