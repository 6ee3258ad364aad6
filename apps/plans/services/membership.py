"""
Plan and membership lookup service.

Read-only helpers over TravelPlan and JOINED TripMember rows.
"""

from typing import Iterable, Set
from uuid import UUID

from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.plans.exceptions import PlanNotFoundError
from apps.plans.models import PlanVisibility, TravelPlan, TripMember, TripStatus


def get_plan(*, plan_id: UUID) -> TravelPlan:
    """
    Get a travel plan by ID.

    Raises:
        PlanNotFoundError: If plan doesn't exist
    """
    try:
        return TravelPlan.objects.select_related('owner').get(id=plan_id)
    except TravelPlan.DoesNotExist:
        raise PlanNotFoundError()


def get_joined_members(*, plan_id: UUID) -> QuerySet[TripMember]:
    """Get JOINED members of a plan in join order."""
    return (
        TripMember.objects
        .filter(plan_id=plan_id, status=TripStatus.JOINED)
        .select_related('user')
        .order_by('joined_at')
    )


def is_joined_member(*, plan_id: UUID, user_id: UUID) -> bool:
    return TripMember.objects.filter(
        plan_id=plan_id,
        user_id=user_id,
        status=TripStatus.JOINED
    ).exists()


def filter_joined_user_ids(*, plan_id: UUID, user_ids: Iterable[UUID]) -> Set[str]:
    """Return the subset of user_ids (as strings) that are JOINED members."""
    joined = TripMember.objects.filter(
        plan_id=plan_id,
        user_id__in=list(user_ids),
        status=TripStatus.JOINED
    ).values_list('user_id', flat=True)
    return {str(user_id) for user_id in joined}


def viewable_plan_ids(*, user: User) -> QuerySet:
    """IDs of plans the user can view: public, owned, or JOINED."""
    return TravelPlan.objects.filter(
        Q(visibility=PlanVisibility.PUBLIC) |
        Q(owner=user) |
        Q(members__user=user, members__status=TripStatus.JOINED)
    ).values_list('id', flat=True).distinct()
