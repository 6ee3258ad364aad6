# ==========================================
# apps/plans/admin.py
# ==========================================

from django.contrib import admin
from .models import TravelPlan, TripMember


class TripMemberInline(admin.TabularInline):
    """Inline admin for members within a plan."""
    model = TripMember
    extra = 0
    fields = ['user', 'role', 'status', 'joined_at']
    readonly_fields = ['joined_at']
    autocomplete_fields = ['user']


@admin.register(TravelPlan)
class TravelPlanAdmin(admin.ModelAdmin):
    """Admin interface for travel plans with inline members."""

    list_display = [
        'title',
        'destination',
        'owner',
        'visibility',
        'start_date',
        'end_date',
        'budget_max',
        'member_count',
    ]
    list_filter = ['visibility', 'start_date']
    search_fields = ['title', 'destination', 'owner__email']
    date_hierarchy = 'start_date'
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [TripMemberInline]

    fieldsets = (
        ('Plan', {
            'fields': ('id', 'title', 'destination', 'owner', 'visibility')
        }),
        ('Dates', {
            'fields': ('start_date', 'end_date'),
        }),
        ('Budget', {
            'fields': ('budget_min', 'budget_max'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def member_count(self, obj):
        return obj.members.count()
    member_count.short_description = 'Members'


@admin.register(TripMember)
class TripMemberAdmin(admin.ModelAdmin):
    """Admin interface for trip memberships."""

    list_display = ['user', 'plan', 'role', 'status', 'joined_at']
    list_filter = ['role', 'status']
    search_fields = ['user__email', 'plan__title']
    list_select_related = ['user', 'plan']
