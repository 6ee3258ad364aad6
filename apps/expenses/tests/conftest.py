import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.expenses.models import Expense, ExpenseParticipant, ExpenseCategory, SplitType
from apps.plans.models import TravelPlan, TripMember, TripRole, TripStatus, PlanVisibility


def make_user(email, display_name='', **extra):
    return User.objects.create_user(
        email=email,
        password='TestPass123!',
        display_name=display_name,
        **extra,
    )


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for():
    """Return a factory building API clients authenticated as a given user."""
    def _client_for(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client_for


@pytest.fixture
def owner(db):
    """Plan owner."""
    return make_user('alice@example.com', 'Alice')


@pytest.fixture
def member(db):
    """JOINED editor."""
    return make_user('bob@example.com', 'Bob')


@pytest.fixture
def other_member(db):
    """JOINED viewer."""
    return make_user('carol@example.com', 'Carol')


@pytest.fixture
def plan_admin(db):
    """JOINED member with the ADMIN trip role."""
    return make_user('dana@example.com', 'Dana')


@pytest.fixture
def invited_user(db):
    """Invited but not yet JOINED."""
    return make_user('erin@example.com', 'Erin')


@pytest.fixture
def outsider(db):
    """User with no membership in any plan."""
    return make_user('mallory@example.com', 'Mallory')


@pytest.fixture
def system_admin(db):
    """User holding the system ADMIN role."""
    return make_user('root@example.com', 'Root', role=UserRole.ADMIN)


@pytest.fixture
def plan(db, owner, member, other_member, invited_user):
    """
    Private plan 2025-06-01..2025-06-10 with budget_max 1000.

    JOINED: owner (OWNER), member (EDITOR), other_member (VIEWER).
    INVITED: invited_user.
    """
    plan = TravelPlan.objects.create(
        owner=owner,
        title='Lisbon Weekend',
        destination='Lisbon',
        visibility=PlanVisibility.PRIVATE,
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 10),
        budget_max=Decimal('1000.00'),
    )
    TripMember.objects.create(plan=plan, user=owner, role=TripRole.OWNER, status=TripStatus.JOINED)
    TripMember.objects.create(plan=plan, user=member, role=TripRole.EDITOR, status=TripStatus.JOINED)
    TripMember.objects.create(plan=plan, user=other_member, role=TripRole.VIEWER, status=TripStatus.JOINED)
    TripMember.objects.create(plan=plan, user=invited_user, role=TripRole.VIEWER, status=TripStatus.INVITED)
    return plan


@pytest.fixture
def plan_with_admin(plan, plan_admin):
    """The plan with an extra JOINED trip ADMIN."""
    TripMember.objects.create(plan=plan, user=plan_admin, role=TripRole.ADMIN, status=TripStatus.JOINED)
    return plan


@pytest.fixture
def public_plan(db, owner):
    """Public plan with only the owner JOINED and no budget."""
    plan = TravelPlan.objects.create(
        owner=owner,
        title='Open Hiking Trip',
        visibility=PlanVisibility.PUBLIC,
        start_date=date(2025, 7, 1),
        end_date=date(2025, 7, 3),
    )
    TripMember.objects.create(plan=plan, user=owner, role=TripRole.OWNER, status=TripStatus.JOINED)
    return plan


@pytest.fixture
def make_expense(db):
    """
    Insert an expense with explicit shares, bypassing the split service.

    ``shares`` is a list of (user, amount) pairs.
    """
    def _make_expense(plan, payer, amount, shares, **extra):
        extra.setdefault('category', ExpenseCategory.FOOD)
        extra.setdefault('split_type', SplitType.CUSTOM)
        extra.setdefault('expense_date', plan.start_date)
        expense = Expense.objects.create(
            plan=plan,
            payer=payer,
            amount=Decimal(amount),
            **extra,
        )
        for user, share in shares:
            ExpenseParticipant.objects.create(expense=expense, user=user, amount=Decimal(share))
        return expense
    return _make_expense
