"""
Expense lifecycle service.

Create, read, list, update, delete and settle expenses. Writes run inside
a single transaction; member notifications are registered with
``transaction.on_commit`` and never affect the outcome of the write.
"""

import logging
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.accounts.models import User
from apps.expenses.exceptions import (
    ExpenseNotFoundError,
    InvalidAmountError,
    InvalidExpenseDateError,
    InvalidSplitError,
    NoPlanMembersError,
    ParticipantAlreadyPaidError,
    ParticipantNotFoundError,
    ParticipantNotMemberError,
    PayerNotMemberError,
)
from apps.expenses.models import Expense, ExpenseParticipant, SplitType
from apps.notifications.models import NotificationType
from apps.notifications.services import notify_plan_members, notify_user
from apps.plans.models import TravelPlan
from apps.plans.services import (
    filter_joined_user_ids,
    get_joined_members,
    get_plan,
    is_joined_member,
    viewable_plan_ids,
)

from .authorization import (
    assert_can_add_expense,
    assert_can_modify_expense,
    assert_can_settle,
    assert_can_view_plan,
)
from .split_calculation import (
    calculate_equal_split,
    derive_percentage,
    percentage_to_amount,
    round_money,
    to_decimal,
    validate_custom_split,
    validate_percentage_split,
)


logger = logging.getLogger(__name__)


SORT_FIELDS = {
    'expense_date': 'expense_date',
    'amount': 'amount',
    'created_at': 'created_at',
}


# =============================================================================
# Helpers
# =============================================================================

def _notify_after_commit(send, *args) -> None:
    """Run a notification call after commit, logging and absorbing failures."""
    def _send():
        try:
            send(*args)
        except Exception:
            logger.exception("Failed to send expense notification via %s", getattr(send, '__name__', send))

    transaction.on_commit(_send)


def _parse_expense_date(value) -> date:
    """Accept a date, datetime or ISO 8601 string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, str):
        try:
            parsed = parse_date(value)
            if parsed is None:
                parsed_dt = parse_datetime(value)
                parsed = parsed_dt.date() if parsed_dt else None
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed

    raise InvalidExpenseDateError('Invalid expense date.')


def _validate_expense_date(plan: TravelPlan, value) -> date:
    expense_date = _parse_expense_date(value)
    if not plan.contains_date(expense_date):
        raise InvalidExpenseDateError(
            f"Expense date must be within the plan's date range "
            f"({plan.start_date.isoformat()} to {plan.end_date.isoformat()})."
        )
    return expense_date


def _validate_amount(value) -> Decimal:
    try:
        amount = to_decimal(value)
    except InvalidSplitError:
        raise InvalidAmountError()
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError()
    return amount


def _assert_participants_joined(plan: TravelPlan, participants: List[Dict[str, Any]]) -> None:
    user_ids = [p['user_id'] for p in participants]
    joined = filter_joined_user_ids(plan_id=plan.id, user_ids=user_ids)
    if any(str(user_id) not in joined for user_id in user_ids):
        raise ParticipantNotMemberError()


def _build_shares(
    plan: TravelPlan,
    amount: Decimal,
    split_type: str,
    participants: Optional[List[Dict[str, Any]]]
) -> List[tuple]:
    """Return (user_id, owed amount) pairs for the chosen split policy."""
    if split_type == SplitType.EQUAL:
        # Supplied participants are ignored; every JOINED member shares
        members = list(get_joined_members(plan_id=plan.id))
        if not members:
            raise NoPlanMembersError()
        share = calculate_equal_split(amount, len(members))
        return [(member.user_id, share) for member in members]

    if split_type == SplitType.CUSTOM:
        validate_custom_split(amount, participants)
        _assert_participants_joined(plan, participants)
        return [(p['user_id'], round_money(p['amount'])) for p in participants]

    if split_type == SplitType.PERCENTAGE:
        validate_percentage_split(participants)
        _assert_participants_joined(plan, participants)
        return [
            (p['user_id'], percentage_to_amount(amount, p['percentage']))
            for p in participants
        ]

    raise InvalidSplitError(f"Unknown split type: {split_type}")


def _expense_queryset() -> QuerySet[Expense]:
    return (
        Expense.objects
        .select_related('plan', 'payer')
        .prefetch_related('participants__user')
    )


def _load_expense(expense_id: UUID) -> Expense:
    try:
        return _expense_queryset().get(id=expense_id)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError()


# =============================================================================
# Lifecycle
# =============================================================================

@transaction.atomic
def create_expense(
    *,
    user: User,
    plan_id: UUID,
    payer_id: UUID,
    amount,
    category: str,
    expense_date,
    split_type: str,
    currency: Optional[str] = None,
    description: Optional[str] = None,
    location_id: Optional[UUID] = None,
    participants: Optional[List[Dict[str, Any]]] = None
) -> Expense:
    """
    Create an expense and its participant shares.

    Args:
        user: User recording the expense
        plan_id: UUID of the travel plan
        payer_id: UUID of the member who paid
        amount: Positive total
        category: ExpenseCategory value
        expense_date: date, datetime or ISO string within the plan window
        split_type: SplitType value (fixed for the expense's lifetime)
        currency: Currency code, defaults to EXPENSE_DEFAULT_CURRENCY
        description: Optional free text
        location_id: Optional itinerary location reference
        participants: ``[{'user_id', 'amount'}]`` for CUSTOM or
            ``[{'user_id', 'percentage'}]`` for PERCENTAGE; ignored for EQUAL

    Returns:
        Created Expense with participants prefetched

    Raises:
        PlanNotFoundError: If plan doesn't exist
        PlanAccessDeniedError: If user is not a member of a non-public plan
        PayerNotMemberError: If payer is not JOINED
        InvalidAmountError: If amount is not positive
        InvalidExpenseDateError: If the date is malformed or outside the plan
        InvalidSplitError: If the split does not reconcile
        ParticipantNotMemberError: If a listed participant is not JOINED
        NoPlanMembersError: If an EQUAL split finds no JOINED members
    """
    plan = get_plan(plan_id=plan_id)
    assert_can_add_expense(user=user, plan=plan)

    if not is_joined_member(plan_id=plan.id, user_id=payer_id):
        raise PayerNotMemberError()

    amount = _validate_amount(amount)
    expense_date = _validate_expense_date(plan, expense_date)
    shares = _build_shares(plan, amount, split_type, participants)

    expense = Expense.objects.create(
        plan=plan,
        payer_id=payer_id,
        amount=round_money(amount),
        currency=currency or settings.EXPENSE_DEFAULT_CURRENCY,
        category=category,
        description=description or None,
        expense_date=expense_date,
        split_type=split_type,
        location_id=location_id,
    )

    for user_id, share in shares:
        ExpenseParticipant.objects.create(
            expense=expense,
            user_id=user_id,
            amount=share,
        )

    logger.info(
        "Expense %s created in plan %s by %s (%s %s, %s split, %d participants)",
        expense.id, plan.id, user.id, expense.currency, expense.amount, split_type, len(shares)
    )

    _notify_after_commit(
        notify_plan_members,
        plan.id,
        user.id,
        {
            'type': NotificationType.EXPENSE_ADDED,
            'title': 'New expense added',
            'message': f"A new expense of {expense.currency} {expense.amount} has been added to {plan.title}",
            'data': {'plan_id': str(plan.id), 'expense_id': str(expense.id)},
        },
    )

    return _load_expense(expense.id)


def get_expense(*, user: User, expense_id: UUID) -> Expense:
    """
    Get a single expense the user is allowed to see.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        PlanAccessDeniedError: If user cannot view the expense's plan
    """
    expense = _load_expense(expense_id)
    assert_can_view_plan(user=user, plan=expense.plan)
    return expense


def get_expenses(
    *,
    user: User,
    filters: Optional[Dict[str, Any]] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None
) -> Dict[str, Any]:
    """
    List expenses visible to the user.

    Supported filters: ``category``, ``plan_id``, ``payer_id``,
    ``split_type``, ``start_date``, ``end_date`` (inclusive) and
    ``search_term`` (case-insensitive match in description).

    Returns:
        ``{'meta': {'page', 'limit', 'total', 'total_pages'}, 'data': [Expense]}``

    Raises:
        PlanNotFoundError: If ``plan_id`` names a missing plan
        PlanAccessDeniedError: If user cannot view the ``plan_id`` plan
    """
    filters = filters or {}

    page = max(int(page or 1), 1)
    limit = int(limit or settings.EXPENSE_PAGE_SIZE)
    limit = min(max(limit, 1), settings.EXPENSE_MAX_PAGE_SIZE)

    queryset = _expense_queryset()

    if filters.get('plan_id'):
        plan = get_plan(plan_id=filters['plan_id'])
        assert_can_view_plan(user=user, plan=plan)
        queryset = queryset.filter(plan_id=plan.id)
    else:
        queryset = queryset.filter(plan_id__in=viewable_plan_ids(user=user))

    if filters.get('category'):
        queryset = queryset.filter(category=filters['category'])
    if filters.get('payer_id'):
        queryset = queryset.filter(payer_id=filters['payer_id'])
    if filters.get('split_type'):
        queryset = queryset.filter(split_type=filters['split_type'])
    if filters.get('start_date'):
        queryset = queryset.filter(expense_date__gte=filters['start_date'])
    if filters.get('end_date'):
        queryset = queryset.filter(expense_date__lte=filters['end_date'])
    if filters.get('search_term'):
        queryset = queryset.filter(description__icontains=filters['search_term'])

    field = SORT_FIELDS.get(sort_by or 'expense_date', 'expense_date')
    prefix = '' if sort_order == 'asc' else '-'
    queryset = queryset.order_by(f'{prefix}{field}', f'{prefix}created_at', 'id')

    total = queryset.count()
    offset = (page - 1) * limit

    return {
        'meta': {
            'page': page,
            'limit': limit,
            'total': total,
            'total_pages': math.ceil(total / limit),
        },
        'data': list(queryset[offset:offset + limit]),
    }


@transaction.atomic
def update_expense(*, user: User, expense_id: UUID, data: Dict[str, Any]) -> Expense:
    """
    Patch an expense.

    ``payer_id``, ``amount``, ``currency``, ``category``, ``description``,
    ``expense_date`` and ``location_id`` may change; ``split_type`` and
    ``plan_id`` may not. When the amount changes, EQUAL shares are
    recomputed over the current participants and PERCENTAGE shares keep
    their previous proportion of the total. CUSTOM shares are left as
    entered.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        ExpensePermissionDeniedError: If user is not payer or plan manager
        InvalidSplitError: If split_type or plan_id is changed
        PayerNotMemberError: If the new payer is not JOINED
        InvalidAmountError: If amount is not positive
        InvalidExpenseDateError: If the date is malformed or outside the plan
    """
    try:
        expense = (
            Expense.objects
            .select_for_update()
            .select_related('plan')
            .get(id=expense_id)
        )
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError()

    assert_can_modify_expense(user=user, expense=expense)
    plan = expense.plan

    if data.get('split_type') not in (None, expense.split_type):
        raise InvalidSplitError('Split type cannot be changed after creation.')
    if data.get('plan_id') not in (None, plan.id, str(plan.id)):
        raise InvalidSplitError('An expense cannot be moved to another plan.')

    if 'payer_id' in data and str(data['payer_id']) != str(expense.payer_id):
        if not is_joined_member(plan_id=plan.id, user_id=data['payer_id']):
            raise PayerNotMemberError()
        expense.payer_id = data['payer_id']

    old_amount = expense.amount
    new_amount = old_amount
    if 'amount' in data:
        new_amount = round_money(_validate_amount(data['amount']))
        expense.amount = new_amount

    if 'expense_date' in data:
        expense.expense_date = _validate_expense_date(plan, data['expense_date'])

    for field in ('currency', 'category', 'location_id'):
        if field in data:
            setattr(expense, field, data[field])

    if 'description' in data:
        expense.description = data['description'] or None

    expense.save()

    if new_amount != old_amount and expense.split_type != SplitType.CUSTOM:
        participants = list(
            ExpenseParticipant.objects
            .select_for_update()
            .filter(expense=expense)
            .order_by('created_at', 'id')
        )

        if expense.split_type == SplitType.EQUAL and participants:
            share = calculate_equal_split(new_amount, len(participants))
            for participant in participants:
                participant.amount = share
        elif expense.split_type == SplitType.PERCENTAGE:
            for participant in participants:
                pct = derive_percentage(participant.amount, old_amount)
                participant.amount = percentage_to_amount(new_amount, pct)

        for participant in participants:
            participant.save(update_fields=['amount', 'updated_at'])

    logger.info(
        "Expense %s updated by %s (fields: %s)",
        expense.id, user.id, ', '.join(sorted(data.keys()))
    )

    _notify_after_commit(
        notify_plan_members,
        plan.id,
        user.id,
        {
            'type': NotificationType.EXPENSE_UPDATED,
            'title': 'Expense updated',
            'message': f"An expense has been updated in {plan.title}",
            'data': {'plan_id': str(plan.id), 'expense_id': str(expense.id)},
        },
    )

    return _load_expense(expense.id)


@transaction.atomic
def delete_expense(*, user: User, expense_id: UUID) -> None:
    """
    Delete an expense and its participants.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        ExpensePermissionDeniedError: If user is not payer or plan manager
    """
    try:
        expense = Expense.objects.select_related('plan').get(id=expense_id)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError()

    assert_can_modify_expense(user=user, expense=expense)
    plan = expense.plan

    expense.delete()

    logger.info("Expense %s deleted from plan %s by %s", expense_id, plan.id, user.id)

    _notify_after_commit(
        notify_plan_members,
        plan.id,
        user.id,
        {
            'type': NotificationType.EXPENSE_DELETED,
            'title': 'Expense deleted',
            'message': f"An expense has been deleted from {plan.title}",
            'data': {'plan_id': str(plan.id), 'expense_id': str(expense_id)},
        },
    )


def settle_expense(
    *,
    user: User,
    expense_id: UUID,
    participant_id: UUID
) -> ExpenseParticipant:
    """
    Mark one participant's share as paid.

    The flag flips through a conditional update on ``is_paid=False`` so
    concurrent settles yield a single winner; the loser gets the same
    error as a sequential double settle.

    Returns:
        The settled ExpenseParticipant

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        ParticipantNotFoundError: If participant is not part of the expense
        SettlementPermissionDeniedError: If user is neither the participant
            nor a plan manager
        ParticipantAlreadyPaidError: If the share is already paid
    """
    try:
        expense = Expense.objects.select_related('plan').get(id=expense_id)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError()

    try:
        participant = (
            ExpenseParticipant.objects
            .select_related('user')
            .get(id=participant_id, expense=expense)
        )
    except ExpenseParticipant.DoesNotExist:
        raise ParticipantNotFoundError()

    assert_can_settle(user=user, expense=expense, participant=participant)

    if participant.is_paid:
        raise ParticipantAlreadyPaidError()

    now = timezone.now()
    updated = ExpenseParticipant.objects.filter(
        id=participant.id,
        is_paid=False
    ).update(is_paid=True, paid_at=now, updated_at=now)

    if updated == 0:
        raise ParticipantAlreadyPaidError()

    participant.refresh_from_db()

    logger.info(
        "Participant %s settled %s on expense %s (by %s)",
        participant.user_id, participant.amount, expense.id, user.id
    )

    if participant.user_id != expense.payer_id:
        _notify_after_commit(
            notify_user,
            expense.payer_id,
            {
                'type': NotificationType.EXPENSE_UPDATED,
                'title': 'Expense settled',
                'message': (
                    f"{participant.user.get_display_name()} has marked their share as paid "
                    f"for an expense in {expense.plan.title}"
                ),
                'data': {
                    'plan_id': str(expense.plan_id),
                    'expense_id': str(expense.id),
                    'participant_id': str(participant.id),
                },
            },
        )

    return participant
