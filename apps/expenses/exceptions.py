"""
Domain exceptions for expenses app.

Every exception is a DRF APIException so services can raise them directly
and views return the matching status code without translation:

    ExpenseServiceError (400)
    ├── InvalidAmountError
    ├── InvalidExpenseDateError
    ├── InvalidSplitError
    ├── PayerNotMemberError
    ├── ParticipantNotMemberError
    ├── NoPlanMembersError
    └── ParticipantAlreadyPaidError
    ExpenseNotFoundError (404)
    ParticipantNotFoundError (404)
    PlanAccessDeniedError (403)
    ExpensePermissionDeniedError (403)
    SettlementPermissionDeniedError (403)

PlanNotFoundError is shared with the plans app.
"""
from rest_framework.exceptions import APIException

from apps.plans.exceptions import PlanNotFoundError


class ExpenseServiceError(APIException):
    """Base exception for invalid expense requests."""
    status_code = 400
    default_detail = 'Invalid expense request.'
    default_code = 'expense_error'


class InvalidAmountError(ExpenseServiceError):
    """Amount must be greater than 0."""
    default_detail = 'Amount must be greater than 0.'
    default_code = 'invalid_amount'


class InvalidExpenseDateError(ExpenseServiceError):
    """Expense date is malformed or outside the plan's dates."""
    default_detail = "Expense date must be within the plan's date range."
    default_code = 'invalid_expense_date'


class InvalidSplitError(ExpenseServiceError):
    """Split participants or amounts do not reconcile."""
    default_detail = 'Invalid expense split.'
    default_code = 'invalid_split'


class PayerNotMemberError(ExpenseServiceError):
    """Payer is not a JOINED member of the plan."""
    default_detail = 'Payer must be a member of this plan.'
    default_code = 'payer_not_member'


class ParticipantNotMemberError(ExpenseServiceError):
    """A listed participant is not a JOINED member of the plan."""
    default_detail = 'All participants must be members of this plan.'
    default_code = 'participant_not_member'


class NoPlanMembersError(ExpenseServiceError):
    """EQUAL split requested on a plan without JOINED members."""
    default_detail = 'Cannot create expense: plan has no members.'
    default_code = 'no_plan_members'


class ParticipantAlreadyPaidError(ExpenseServiceError):
    """Participant share is already marked as paid."""
    default_detail = 'This expense participant is already marked as paid.'
    default_code = 'participant_already_paid'


class ExpenseNotFoundError(APIException):
    """Expense not found."""
    status_code = 404
    default_detail = 'Expense not found.'
    default_code = 'expense_not_found'


class ParticipantNotFoundError(APIException):
    """Participant not found in the expense."""
    status_code = 404
    default_detail = 'Participant not found in this expense.'
    default_code = 'participant_not_found'


class PlanAccessDeniedError(APIException):
    """User may not view or add to the plan."""
    status_code = 403
    default_detail = 'You are not allowed to view this plan.'
    default_code = 'plan_access_denied'


class ExpensePermissionDeniedError(APIException):
    """User may not update or delete the expense."""
    status_code = 403
    default_detail = 'Only the payer or plan owner/admin can modify this expense.'
    default_code = 'expense_permission_denied'


class SettlementPermissionDeniedError(APIException):
    """User may not settle the participant's share."""
    status_code = 403
    default_detail = (
        'You are not allowed to settle this expense. Only the participant '
        'themselves or plan owner/admin can settle it.'
    )
    default_code = 'settlement_permission_denied'


__all__ = [
    'ExpenseServiceError',
    'InvalidAmountError',
    'InvalidExpenseDateError',
    'InvalidSplitError',
    'PayerNotMemberError',
    'ParticipantNotMemberError',
    'NoPlanMembersError',
    'ParticipantAlreadyPaidError',
    'ExpenseNotFoundError',
    'ParticipantNotFoundError',
    'PlanNotFoundError',
    'PlanAccessDeniedError',
    'ExpensePermissionDeniedError',
    'SettlementPermissionDeniedError',
]
