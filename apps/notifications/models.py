from django.db import models
import uuid


class NotificationType(models.TextChoices):
    EXPENSE_ADDED = 'EXPENSE_ADDED', 'Expense added'
    EXPENSE_UPDATED = 'EXPENSE_UPDATED', 'Expense updated'
    EXPENSE_DELETED = 'EXPENSE_DELETED', 'Expense deleted'


class Notification(models.Model):
    """In-app notification addressed to a single user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=30, choices=NotificationType.choices)
    title = models.CharField(max_length=200)
    message = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['user', 'is_read']),
            models.Index(fields=['user', 'created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.type} for {self.user.email}"
