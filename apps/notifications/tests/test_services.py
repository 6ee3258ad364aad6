import pytest
from datetime import date
from apps.accounts.models import User
from apps.notifications.models import Notification, NotificationType
from apps.notifications.services import notify_plan_members, notify_user
from apps.plans.models import TravelPlan, TripMember, TripRole, TripStatus


@pytest.fixture
def users(db):
    return [
        User.objects.create_user(email=f'traveller{i}@example.com', password='x')
        for i in range(4)
    ]


@pytest.fixture
def plan(db, users):
    """Plan with three JOINED members and one who left."""
    plan = TravelPlan.objects.create(
        owner=users[0],
        title='Alps Trip',
        start_date=date(2025, 2, 1),
        end_date=date(2025, 2, 7),
    )
    for user in users[:3]:
        TripMember.objects.create(plan=plan, user=user, role=TripRole.EDITOR, status=TripStatus.JOINED)
    TripMember.objects.create(plan=plan, user=users[3], role=TripRole.VIEWER, status=TripStatus.LEFT)
    return plan


PAYLOAD = {
    'type': NotificationType.EXPENSE_ADDED,
    'title': 'New expense added',
    'message': 'A new expense of USD 30 has been added to Alps Trip',
    'data': {'planId': 'x'},
}


@pytest.mark.django_db
class TestNotifyPlanMembers:
    """Tests for notify_plan_members()."""

    def test_excludes_actor_and_non_joined(self, plan, users):
        count = notify_plan_members(plan.id, users[0].id, PAYLOAD)

        assert count == 2
        recipients = set(Notification.objects.values_list('user_id', flat=True))
        assert recipients == {users[1].id, users[2].id}

    def test_without_exclusion(self, plan, users):
        assert notify_plan_members(plan.id, None, PAYLOAD) == 3

    def test_payload_is_stored(self, plan, users):
        notify_plan_members(plan.id, users[0].id, PAYLOAD)

        notification = Notification.objects.filter(user=users[1]).get()
        assert notification.type == NotificationType.EXPENSE_ADDED
        assert notification.title == 'New expense added'
        assert notification.data == {'planId': 'x'}
        assert notification.is_read is False


@pytest.mark.django_db
class TestNotifyUser:
    """Tests for notify_user()."""

    def test_creates_single_notification(self, users):
        payload = dict(PAYLOAD, data={})
        notification = notify_user(users[2].id, payload)

        assert notification.user == users[2]
        assert Notification.objects.count() == 1
