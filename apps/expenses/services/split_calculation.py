"""
Split calculation.

Pure Decimal arithmetic for dividing an expense among participants.
Amounts are rounded half-away-from-zero to 2 places and compared against
the expense total with a tolerance of exactly 0.01.

Example:
    10.00 split EQUAL among 3 members::

        >>> calculate_equal_split(Decimal('10.00'), 3)
        Decimal('3.33')

    The stored shares sum to 9.99, which is accepted because the
    difference does not exceed the tolerance.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable, List, Mapping, Optional

from apps.expenses.exceptions import InvalidSplitError


CENT = Decimal('0.01')
SPLIT_TOLERANCE = Decimal('0.01')
HUNDRED = Decimal('100')


def to_decimal(value) -> Decimal:
    """Convert int/float/str/Decimal to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidSplitError(f"Invalid numeric value: {value!r}")


def round_money(value) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_equal_split(total, member_count: int) -> Decimal:
    """
    Amount each of ``member_count`` people owes for ``total``.

    Raises:
        InvalidSplitError: If member_count is not positive
    """
    if member_count <= 0:
        raise InvalidSplitError('Cannot split expense: no members to split between.')

    return round_money(to_decimal(total) / Decimal(member_count))


def _assert_unique_users(participants: List[Mapping]) -> None:
    seen = set()
    for participant in participants:
        user_id = str(participant.get('user_id'))
        if user_id in seen:
            raise InvalidSplitError(f"User {user_id} is listed more than once.")
        seen.add(user_id)


def validate_custom_split(total, participants: Optional[Iterable[Mapping]]) -> None:
    """
    Check caller-supplied amounts against the expense total.

    Raises:
        InvalidSplitError: If participants is empty, any entry lacks an
            amount, users repeat, or the amounts miss the total by more
            than 0.01
    """
    participants = list(participants or [])
    if not participants:
        raise InvalidSplitError('Participants are required for custom split.')

    if any(p.get('amount') is None for p in participants):
        raise InvalidSplitError('All participants must have an amount for custom split.')

    _assert_unique_users(participants)

    total = to_decimal(total)
    amount_sum = sum((to_decimal(p['amount']) for p in participants), Decimal('0'))

    if abs(amount_sum - total) > SPLIT_TOLERANCE:
        raise InvalidSplitError(
            f"Sum of participant amounts ({round_money(amount_sum)}) must equal "
            f"the total amount ({round_money(total)})."
        )


def validate_percentage_split(participants: Optional[Iterable[Mapping]]) -> None:
    """
    Check that participant percentages add up to 100.

    Raises:
        InvalidSplitError: If participants is empty, any entry lacks a
            percentage, users repeat, or the sum misses 100 by more than 0.01
    """
    participants = list(participants or [])
    if not participants:
        raise InvalidSplitError('Participants are required for percentage split.')

    if any(p.get('percentage') is None for p in participants):
        raise InvalidSplitError('All participants must have a percentage for percentage split.')

    _assert_unique_users(participants)

    pct_sum = sum((to_decimal(p['percentage']) for p in participants), Decimal('0'))

    if abs(pct_sum - HUNDRED) > SPLIT_TOLERANCE:
        raise InvalidSplitError(f"Sum of percentages ({pct_sum}) must equal 100%.")


def percentage_to_amount(total, percentage) -> Decimal:
    """Share of ``total`` for ``percentage`` percent, rounded to cents."""
    return round_money(to_decimal(total) * to_decimal(percentage) / HUNDRED)


def derive_percentage(amount, total) -> Decimal:
    """
    Percentage of ``total`` that ``amount`` represents.

    Left unrounded so that reapplying it to a new total loses no precision.
    """
    total = to_decimal(total)
    if total == 0:
        return Decimal('0')
    return to_decimal(amount) / total * HUNDRED
