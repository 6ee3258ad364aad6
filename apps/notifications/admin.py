from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Read-mostly admin for delivered notifications."""

    list_display = ['user', 'type', 'title', 'is_read', 'created_at']
    list_filter = ['type', 'is_read']
    search_fields = ['user__email', 'title', 'message']
    readonly_fields = ['id', 'user', 'type', 'title', 'message', 'data', 'created_at']
    list_select_related = ['user']

    def has_add_permission(self, request):
        """Notifications are created by services only."""
        return False
