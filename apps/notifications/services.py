"""
Notification emitter.

Creates Notification rows for plan members or single users. Callers that
must not depend on delivery (the expense write path) invoke these after
commit and swallow failures themselves.
"""

from typing import Optional, TypedDict
from uuid import UUID

from django.db import transaction

from apps.plans.models import TripMember, TripStatus
from .models import Notification


class NotificationPayload(TypedDict, total=False):
    type: str
    title: str
    message: str
    data: dict


def create_notification(user_id: UUID, payload: NotificationPayload) -> Notification:
    return Notification.objects.create(
        user_id=user_id,
        type=payload['type'],
        title=payload['title'],
        message=payload['message'],
        data=payload.get('data', {}),
    )


@transaction.atomic
def notify_plan_members(
    plan_id: UUID,
    exclude_user_id: Optional[UUID],
    payload: NotificationPayload
) -> int:
    """
    Notify every JOINED member of a plan except ``exclude_user_id``.

    Returns:
        Number of notifications created
    """
    user_ids = (
        TripMember.objects
        .filter(plan_id=plan_id, status=TripStatus.JOINED)
        .exclude(user_id=exclude_user_id)
        .values_list('user_id', flat=True)
    )

    notifications = [create_notification(user_id, payload) for user_id in user_ids]
    return len(notifications)


def notify_user(user_id: UUID, payload: NotificationPayload) -> Notification:
    return create_notification(user_id, payload)
