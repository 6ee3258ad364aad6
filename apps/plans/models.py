# ==========================================
# apps/plans/models.py
# ==========================================

from django.db import models
import uuid


class PlanVisibility(models.TextChoices):
    PUBLIC = 'PUBLIC', 'Public'
    PRIVATE = 'PRIVATE', 'Private'
    UNLISTED = 'UNLISTED', 'Unlisted'


class TripRole(models.TextChoices):
    OWNER = 'OWNER', 'Owner'
    ADMIN = 'ADMIN', 'Admin'
    EDITOR = 'EDITOR', 'Editor'
    VIEWER = 'VIEWER', 'Viewer'


class TripStatus(models.TextChoices):
    INVITED = 'INVITED', 'Invited'
    JOINED = 'JOINED', 'Joined'
    LEFT = 'LEFT', 'Left'
    REMOVED = 'REMOVED', 'Removed'


class TravelPlan(models.Model):
    """Trip that members plan and share costs for."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='owned_plans')
    title = models.CharField(max_length=200)
    destination = models.CharField(max_length=200, blank=True)
    visibility = models.CharField(
        max_length=10,
        choices=PlanVisibility.choices,
        default=PlanVisibility.PRIVATE
    )
    start_date = models.DateField()
    end_date = models.DateField()

    # Either bound may be left open
    budget_min = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    budget_max = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'travel_plans'
        indexes = [
            models.Index(fields=['owner', 'created_at']),
            models.Index(fields=['visibility']),
        ]
        ordering = ['-start_date', '-created_at']

    def __str__(self):
        return self.title

    @property
    def is_public(self):
        return self.visibility == PlanVisibility.PUBLIC

    @property
    def has_budget(self):
        return self.budget_min is not None or self.budget_max is not None

    def contains_date(self, value):
        """Return True if value lies within [start_date, end_date]."""
        return self.start_date <= value <= self.end_date


class TripMember(models.Model):
    """User's membership in a travel plan with a trip role."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    plan = models.ForeignKey(TravelPlan, on_delete=models.CASCADE, related_name='members')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='trip_memberships')
    role = models.CharField(max_length=10, choices=TripRole.choices, default=TripRole.VIEWER)
    status = models.CharField(max_length=10, choices=TripStatus.choices, default=TripStatus.INVITED)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'trip_members'
        unique_together = [['plan', 'user']]
        indexes = [
            models.Index(fields=['plan', 'status']),
            models.Index(fields=['user', 'status']),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.plan.title} ({self.role}, {self.status})"

    @property
    def is_joined(self):
        return self.status == TripStatus.JOINED

    @property
    def is_plan_admin(self):
        return self.role in [TripRole.OWNER, TripRole.ADMIN]
