from django.contrib import admin
from django.utils.html import format_html
from .models import Expense, ExpenseParticipant


def paid_badge(is_paid):
    bg, fg, label = ('#6B8E5E', 'white', 'Paid') if is_paid else ('#E5C49A', '#2C1810', 'Unpaid')
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        bg, fg, label
    )


class ExpenseParticipantInline(admin.TabularInline):
    """Inline admin for participant shares within an expense."""
    model = ExpenseParticipant
    extra = 0
    fields = ['user', 'amount', 'status_badge', 'paid_at']
    readonly_fields = ['status_badge', 'paid_at']

    def status_badge(self, obj):
        return paid_badge(obj.is_paid)
    status_badge.short_description = 'Status'

    def has_add_permission(self, request, obj=None):
        """Shares are created by the split service."""
        return False


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = [
        'category',
        'plan',
        'payer',
        'amount',
        'currency',
        'split_type',
        'get_settled_display',
        'expense_date',
    ]

    list_filter = ['category', 'split_type', 'currency', 'expense_date']

    search_fields = [
        'description',
        'plan__title',
        'payer__email',
        'payer__display_name',
    ]

    readonly_fields = ['split_type', 'created_at', 'updated_at']

    inlines = [ExpenseParticipantInline]
    date_hierarchy = 'expense_date'
    ordering = ['-expense_date', '-created_at']

    fieldsets = (
        ('Expense', {
            'fields': ('plan', 'payer', 'category', 'description', 'location_id')
        }),
        ('Financial Details', {
            'fields': ('amount', 'currency', 'split_type', 'expense_date')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('plan', 'payer').prefetch_related('participants')

    def get_settled_display(self, obj):
        """Settled shares out of total."""
        overview = obj.get_settlement_overview()
        return f"{overview['settled_count']}/{overview['participant_count']}"
    get_settled_display.short_description = 'Settled'


@admin.register(ExpenseParticipant)
class ExpenseParticipantAdmin(admin.ModelAdmin):
    list_display = ['user', 'expense', 'amount', 'status_badge', 'paid_at']
    list_filter = ['is_paid', 'paid_at']
    search_fields = ['user__email', 'user__display_name', 'expense__description']
    readonly_fields = ['expense', 'user', 'amount', 'is_paid', 'paid_at', 'created_at', 'updated_at']

    def status_badge(self, obj):
        return paid_badge(obj.is_paid)
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'is_paid'

    def has_add_permission(self, request):
        return False
