"""
Plans app services layer.

Exposes the capability port plus plan and membership lookups consumed by
the expenses app.
"""

from .capabilities import (
    ROLE_CAPABILITIES,
    PlanPermission,
    get_membership_and_capabilities,
    assert_capability,
)

from .membership import (
    get_plan,
    get_joined_members,
    is_joined_member,
    filter_joined_user_ids,
    viewable_plan_ids,
)


__all__ = [
    # Capability port
    'ROLE_CAPABILITIES',
    'PlanPermission',
    'get_membership_and_capabilities',
    'assert_capability',

    # Plan & membership lookup
    'get_plan',
    'get_joined_members',
    'is_joined_member',
    'filter_joined_user_ids',
    'viewable_plan_ids',
]
