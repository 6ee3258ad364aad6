"""
Capability port.

Answers "what may this user do on this plan" from the user's JOINED trip
membership and system role. Other apps consume only the two functions
below, never the role table directly.
"""

from typing import NamedTuple, Optional
from uuid import UUID

from apps.accounts.models import User
from apps.plans.exceptions import CapabilityDeniedError
from apps.plans.models import TripMember, TripRole, TripStatus


ROLE_CAPABILITIES = {
    TripRole.OWNER: {
        'can_invite': True,
        'can_edit_itinerary': True,
        'can_edit_plan': True,
        'can_delete_plan': True,
        'can_manage_members': True,
    },
    TripRole.ADMIN: {
        'can_invite': True,
        'can_edit_itinerary': True,
        'can_edit_plan': True,
        'can_delete_plan': False,
        'can_manage_members': True,
    },
    TripRole.EDITOR: {
        'can_invite': False,
        'can_edit_itinerary': True,
        'can_edit_plan': False,
        'can_delete_plan': False,
        'can_manage_members': False,
    },
    TripRole.VIEWER: {
        'can_invite': False,
        'can_edit_itinerary': False,
        'can_edit_plan': False,
        'can_delete_plan': False,
        'can_manage_members': False,
    },
}


class PlanPermission(NamedTuple):
    """JOINED membership (or None) plus the capability map it grants."""
    member: Optional[TripMember]
    capabilities: dict


def get_membership_and_capabilities(user: User, plan_id: UUID) -> PlanPermission:
    """
    Resolve a user's membership and capabilities for a plan.

    System admins get OWNER capabilities whether or not they are members.
    Users without a JOINED membership get VIEWER capabilities and
    ``member=None``.

    Args:
        user: User asking
        plan_id: UUID of the travel plan

    Returns:
        PlanPermission(member, capabilities)
    """
    member = (
        TripMember.objects
        .select_related('plan')
        .filter(plan_id=plan_id, user=user, status=TripStatus.JOINED)
        .first()
    )

    if user.is_system_admin:
        return PlanPermission(member, dict(ROLE_CAPABILITIES[TripRole.OWNER]))

    if member is not None:
        return PlanPermission(member, dict(ROLE_CAPABILITIES[member.role]))

    return PlanPermission(None, dict(ROLE_CAPABILITIES[TripRole.VIEWER]))


def assert_capability(
    user: User,
    plan_id: UUID,
    capability: str,
    error_message: Optional[str] = None
) -> PlanPermission:
    """
    Raise CapabilityDeniedError unless the user holds ``capability`` on the plan.

    Raises:
        ValueError: If capability is not a known capability name
        CapabilityDeniedError: If the capability is not granted
    """
    if capability not in ROLE_CAPABILITIES[TripRole.VIEWER]:
        raise ValueError(f"Unknown capability: {capability}")

    permission = get_membership_and_capabilities(user, plan_id)

    if not permission.capabilities[capability]:
        raise CapabilityDeniedError(
            error_message or f"You do not have permission to {capability.replace('_', ' ')[4:]}."
        )

    return permission
