"""
Expenses app services layer.

Split calculation is pure; everything else reads or writes through the
ORM and the plans capability port.
"""

from .split_calculation import (
    round_money,
    calculate_equal_split,
    validate_custom_split,
    validate_percentage_split,
    percentage_to_amount,
    derive_percentage,
)

from .authorization import (
    can_view_plan,
    assert_can_view_plan,
    assert_can_add_expense,
    assert_can_modify_expense,
    assert_can_settle,
)

from .expense_management import (
    create_expense,
    get_expense,
    get_expenses,
    update_expense,
    delete_expense,
    settle_expense,
)

from .settlement import calculate_settlement_summary

from .summary import get_expense_summary


__all__ = [
    # Split calculation
    'round_money',
    'calculate_equal_split',
    'validate_custom_split',
    'validate_percentage_split',
    'percentage_to_amount',
    'derive_percentage',

    # Authorization
    'can_view_plan',
    'assert_can_view_plan',
    'assert_can_add_expense',
    'assert_can_modify_expense',
    'assert_can_settle',

    # Lifecycle
    'create_expense',
    'get_expense',
    'get_expenses',
    'update_expense',
    'delete_expense',
    'settle_expense',

    # Aggregation
    'calculate_settlement_summary',
    'get_expense_summary',
]
