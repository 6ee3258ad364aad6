from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class ExpenseCategory(models.TextChoices):
    FOOD = 'FOOD', 'Food'
    TRANSPORT = 'TRANSPORT', 'Transport'
    ACCOMMODATION = 'ACCOMMODATION', 'Accommodation'
    ACTIVITY = 'ACTIVITY', 'Activity'
    SHOPPING = 'SHOPPING', 'Shopping'
    OTHER = 'OTHER', 'Other'


class SplitType(models.TextChoices):
    EQUAL = 'EQUAL', 'Equal'
    CUSTOM = 'CUSTOM', 'Custom'
    PERCENTAGE = 'PERCENTAGE', 'Percentage'


class Expense(models.Model):
    """Cost paid by one plan member and shared among participants."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    plan = models.ForeignKey(
        'plans.TravelPlan',
        on_delete=models.CASCADE,
        related_name='expenses'
    )
    payer = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expenses_paid'
    )

    # Financial details
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=10, default='USD')

    category = models.CharField(max_length=20, choices=ExpenseCategory.choices)
    description = models.TextField(blank=True, null=True)
    expense_date = models.DateField()

    # Fixed at creation
    split_type = models.CharField(max_length=20, choices=SplitType.choices)

    # Itinerary location reference (locations live outside this app)
    location_id = models.UUIDField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['plan', 'expense_date']),
            models.Index(fields=['payer', 'expense_date']),
            models.Index(fields=['plan', 'category']),
        ]
        ordering = ['-expense_date', '-created_at']

    def __str__(self):
        return f"{self.get_category_display()} - {self.amount} {self.currency} ({self.plan.title})"

    def get_settlement_overview(self):
        """Return counts of settled participants for this expense."""
        participants = list(self.participants.all())
        settled_count = sum(1 for p in participants if p.is_paid)

        return {
            'total_amount': self.amount,
            'participant_count': len(participants),
            'settled_count': settled_count,
            'is_fully_settled': settled_count == len(participants),
        }


class ExpenseParticipant(models.Model):
    """One participant's owed share of an expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    expense = models.ForeignKey(
        Expense,
        on_delete=models.CASCADE,
        related_name='participants'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expense_shares'
    )

    # Amount owed
    amount = models.DecimalField(max_digits=12, decimal_places=2)

    # Payment tracking (false -> true only)
    is_paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expense_participants'
        unique_together = [['expense', 'user']]
        indexes = [
            models.Index(fields=['user', 'is_paid']),
            models.Index(fields=['expense', 'is_paid']),
        ]
        ordering = ['created_at']

    def __str__(self):
        state = 'paid' if self.is_paid else 'unpaid'
        return f"{self.user.get_display_name()} owes {self.amount} ({state})"
