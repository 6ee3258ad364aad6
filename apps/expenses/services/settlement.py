"""
Settlement calculation.

Per-user balances across all expenses of a plan:

    net_amount = total_owed - total_paid

A negative net means the user is owed money, a positive net means the
user still owes. This is a global per-user figure, not a who-owes-whom
graph.
"""

from decimal import Decimal
from typing import Dict, List
from uuid import UUID

from apps.expenses.models import Expense

from .split_calculation import round_money


def calculate_settlement_summary(plan_id: UUID) -> List[Dict]:
    """
    Aggregate paid and owed totals per user for a plan.

    Expenses are walked in creation order; users appear in the order they
    are first seen (as payer or participant).

    Returns:
        List of ``{'user_id', 'user_name', 'total_paid', 'total_owed',
        'net_amount'}`` dicts with 2-decimal amounts
    """
    expenses = (
        Expense.objects
        .filter(plan_id=plan_id)
        .select_related('payer')
        .prefetch_related('participants__user')
        .order_by('created_at', 'id')
    )

    balances: Dict[UUID, Dict] = {}

    def _entry(user):
        if user.id not in balances:
            balances[user.id] = {
                'user_id': user.id,
                'user_name': user.get_display_name(),
                'paid': Decimal('0'),
                'owed': Decimal('0'),
            }
        return balances[user.id]

    for expense in expenses:
        _entry(expense.payer)['paid'] += expense.amount
        for participant in expense.participants.all():
            _entry(participant.user)['owed'] += participant.amount

    return [
        {
            'user_id': entry['user_id'],
            'user_name': entry['user_name'],
            'total_paid': round_money(entry['paid']),
            'total_owed': round_money(entry['owed']),
            'net_amount': round_money(entry['owed'] - entry['paid']),
        }
        for entry in balances.values()
    ]
