import pytest
from datetime import date
from decimal import Decimal
from apps.accounts.models import User, UserRole
from apps.plans.models import TravelPlan, TripMember, TripRole, TripStatus, PlanVisibility


@pytest.fixture
def plan_owner(db):
    """Create and return the plan owner."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Plan Owner',
    )


@pytest.fixture
def plan_editor(db):
    """Create and return a JOINED editor."""
    return User.objects.create_user(
        email='editor@example.com',
        password='TestPass123!',
        display_name='Plan Editor',
    )


@pytest.fixture
def invited_user(db):
    """Create and return a user whose invite is still pending."""
    return User.objects.create_user(
        email='invited@example.com',
        password='TestPass123!',
        display_name='Invited User',
    )


@pytest.fixture
def outsider(db):
    """Create and return a user with no membership."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        display_name='Outsider',
    )


@pytest.fixture
def system_admin(db):
    """Create and return a user holding the system ADMIN role."""
    return User.objects.create_user(
        email='sysadmin@example.com',
        password='TestPass123!',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def plan(db, plan_owner, plan_editor, invited_user):
    """Private plan with a JOINED owner, a JOINED editor and a pending invite."""
    plan = TravelPlan.objects.create(
        owner=plan_owner,
        title='Lisbon Weekend',
        destination='Lisbon',
        visibility=PlanVisibility.PRIVATE,
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 5),
        budget_max=Decimal('1000.00'),
    )
    TripMember.objects.create(plan=plan, user=plan_owner, role=TripRole.OWNER, status=TripStatus.JOINED)
    TripMember.objects.create(plan=plan, user=plan_editor, role=TripRole.EDITOR, status=TripStatus.JOINED)
    TripMember.objects.create(plan=plan, user=invited_user, role=TripRole.VIEWER, status=TripStatus.INVITED)
    return plan


@pytest.fixture
def public_plan(db, plan_owner):
    """Public plan with only the owner joined."""
    plan = TravelPlan.objects.create(
        owner=plan_owner,
        title='Open Hiking Trip',
        visibility=PlanVisibility.PUBLIC,
        start_date=date(2025, 7, 1),
        end_date=date(2025, 7, 3),
    )
    TripMember.objects.create(plan=plan, user=plan_owner, role=TripRole.OWNER, status=TripStatus.JOINED)
    return plan
