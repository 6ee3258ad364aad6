"""
Expense authorization.

Policy checks over the plans capability port. Every check accepts the
already-loaded plan/expense so callers control the queries.
"""

from apps.accounts.models import User
from apps.expenses.exceptions import (
    PlanAccessDeniedError,
    ExpensePermissionDeniedError,
    SettlementPermissionDeniedError,
)
from apps.expenses.models import Expense, ExpenseParticipant
from apps.plans.models import TravelPlan
from apps.plans.services import get_membership_and_capabilities


def can_view_plan(*, user: User, plan: TravelPlan) -> bool:
    """Public plans are open; otherwise owner, JOINED member or system admin."""
    if plan.is_public:
        return True

    if plan.owner_id == user.id or user.is_system_admin:
        return True

    permission = get_membership_and_capabilities(user, plan.id)
    return permission.member is not None


def assert_can_view_plan(*, user: User, plan: TravelPlan) -> None:
    """
    Raises:
        PlanAccessDeniedError: If the user cannot see the plan
    """
    if not can_view_plan(user=user, plan=plan):
        raise PlanAccessDeniedError()


def assert_can_add_expense(*, user: User, plan: TravelPlan) -> None:
    """
    Adding an expense requires the same access as viewing the plan.

    Raises:
        PlanAccessDeniedError: If the user is not a member of a non-public plan
    """
    if not can_view_plan(user=user, plan=plan):
        raise PlanAccessDeniedError(
            'You must be a member of this plan to add expenses.'
        )


def _is_plan_manager(user: User, plan: TravelPlan) -> bool:
    # Plan owner, system admin, or a trip role that may manage members
    if plan.owner_id == user.id or user.is_system_admin:
        return True

    permission = get_membership_and_capabilities(user, plan.id)
    return permission.capabilities['can_manage_members']


def assert_can_modify_expense(*, user: User, expense: Expense) -> None:
    """
    Update and delete are allowed to the payer and plan managers.

    Raises:
        ExpensePermissionDeniedError: Otherwise
    """
    if expense.payer_id == user.id:
        return

    if not _is_plan_manager(user, expense.plan):
        raise ExpensePermissionDeniedError()


def assert_can_settle(
    *,
    user: User,
    expense: Expense,
    participant: ExpenseParticipant
) -> None:
    """
    Settling is allowed to the participant themself and plan managers.

    Raises:
        SettlementPermissionDeniedError: Otherwise
    """
    if participant.user_id == user.id:
        return

    if not _is_plan_manager(user, expense.plan):
        raise SettlementPermissionDeniedError()
