"""
Expense summary for a plan.

Totals by category and by payer, per-user settlement balances and, when
the plan has a budget, actual spend against it.
"""

from decimal import Decimal
from typing import Dict, Optional
from uuid import UUID

from django.conf import settings

from apps.accounts.models import User
from apps.expenses.models import Expense
from apps.plans.models import TravelPlan
from apps.plans.services import get_plan

from .authorization import assert_can_view_plan
from .settlement import calculate_settlement_summary
from .split_calculation import round_money


def _budget_comparison(
    plan: TravelPlan,
    actual_spent: Decimal,
    *,
    with_percentage: bool = True
) -> Optional[Dict]:
    if not plan.has_budget:
        return None

    actual_spent = round_money(actual_spent)
    percentage_used = None
    is_over_budget = False

    # Only the upper bound is measured against
    if plan.budget_max is not None:
        if with_percentage and plan.budget_max > 0:
            percentage_used = round_money(actual_spent / plan.budget_max * 100)
        is_over_budget = actual_spent > plan.budget_max

    return {
        'budget_min': plan.budget_min,
        'budget_max': plan.budget_max,
        'actual_spent': actual_spent,
        'percentage_used': percentage_used,
        'is_over_budget': is_over_budget,
    }


def get_expense_summary(*, user: User, plan_id: UUID) -> Dict:
    """
    Summarize all expenses of a plan.

    Returns:
        Dict with ``plan_id``, ``total_expenses``, ``currency``,
        ``by_category``, ``by_payer``, ``settlement`` and
        ``budget_comparison`` (None when the plan has no budget)

    Raises:
        PlanNotFoundError: If plan doesn't exist
        PlanAccessDeniedError: If user cannot view the plan
    """
    plan = get_plan(plan_id=plan_id)
    assert_can_view_plan(user=user, plan=plan)

    expenses = list(
        Expense.objects
        .filter(plan=plan)
        .select_related('payer')
        .order_by('created_at', 'id')
    )

    if not expenses:
        return {
            'plan_id': plan.id,
            'total_expenses': Decimal('0.00'),
            'currency': settings.EXPENSE_DEFAULT_CURRENCY,
            'by_category': [],
            'by_payer': [],
            'settlement': [],
            'budget_comparison': _budget_comparison(plan, Decimal('0'), with_percentage=False),
        }

    total = sum((expense.amount for expense in expenses), Decimal('0'))

    by_category: Dict[str, Dict] = {}
    by_payer: Dict[UUID, Dict] = {}

    for expense in expenses:
        category = by_category.setdefault(
            expense.category,
            {'category': expense.category, 'total': Decimal('0'), 'count': 0}
        )
        category['total'] += expense.amount
        category['count'] += 1

        payer = by_payer.setdefault(
            expense.payer_id,
            {
                'payer_id': expense.payer_id,
                'payer_name': expense.payer.get_display_name(),
                'total': Decimal('0'),
                'count': 0,
            }
        )
        payer['total'] += expense.amount
        payer['count'] += 1

    for row in list(by_category.values()) + list(by_payer.values()):
        row['total'] = round_money(row['total'])

    return {
        'plan_id': plan.id,
        'total_expenses': round_money(total),
        'currency': expenses[0].currency,
        'by_category': list(by_category.values()),
        'by_payer': list(by_payer.values()),
        'settlement': calculate_settlement_summary(plan.id),
        'budget_comparison': _budget_comparison(plan, total),
    }
