from decimal import Decimal
from rest_framework import serializers
from .models import Expense, ExpenseParticipant, ExpenseCategory, SplitType
from apps.accounts.serializers import UserMinimalSerializer


# =============================================================================
# Input Serializers
# =============================================================================

class ExpenseParticipantInputSerializer(serializers.Serializer):
    """
    One participant of a CUSTOM or PERCENTAGE split.

    Fields:
        user_id (UUID): JOINED plan member
        amount (Decimal): Owed amount, CUSTOM only
        percentage (Decimal): Share of the total, PERCENTAGE only
    """

    user_id = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0'),
        required=False
    )
    # Unbounded precision; the split check applies the tolerance
    percentage = serializers.DecimalField(
        max_digits=None,
        decimal_places=None,
        min_value=Decimal('0'),
        max_value=Decimal('100'),
        required=False
    )


class ExpenseCreateSerializer(serializers.Serializer):
    """Validate input for creating an expense."""

    plan_id = serializers.UUIDField()
    payer_id = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    currency = serializers.CharField(max_length=10, required=False)
    category = serializers.ChoiceField(choices=ExpenseCategory.choices)
    description = serializers.CharField(
        max_length=1000,
        required=False,
        allow_blank=True,
        allow_null=True
    )
    expense_date = serializers.DateField()
    split_type = serializers.ChoiceField(choices=SplitType.choices)
    location_id = serializers.UUIDField(required=False, allow_null=True)
    participants = ExpenseParticipantInputSerializer(many=True, required=False)


class ExpenseUpdateSerializer(serializers.Serializer):
    """
    Validate input for patching an expense.

    split_type and plan_id are not accepted; they are fixed at creation.
    """

    payer_id = serializers.UUIDField(required=False)
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=False
    )
    currency = serializers.CharField(max_length=10, required=False)
    category = serializers.ChoiceField(choices=ExpenseCategory.choices, required=False)
    description = serializers.CharField(
        max_length=1000,
        required=False,
        allow_blank=True,
        allow_null=True
    )
    expense_date = serializers.DateField(required=False)
    location_id = serializers.UUIDField(required=False, allow_null=True)


class ExpenseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for expense listing.

    Query Parameters:
        plan_id (UUID): Filter by plan
        payer_id (UUID): Filter by payer
        category (str): Filter by category
        split_type (str): Filter by split type
        start_date (date): Expenses on or after this date
        end_date (date): Expenses on or before this date
        search_term (str): Case-insensitive match in description
        page (int): Page number, default 1
        limit (int): Page size, default 10, capped at 100
        sort_by (str): expense_date, amount or created_at
        sort_order (str): asc or desc
    """

    plan_id = serializers.UUIDField(required=False)
    payer_id = serializers.UUIDField(required=False)
    category = serializers.ChoiceField(choices=ExpenseCategory.choices, required=False)
    split_type = serializers.ChoiceField(choices=SplitType.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    search_term = serializers.CharField(max_length=200, required=False)
    page = serializers.IntegerField(min_value=1, required=False)
    limit = serializers.IntegerField(min_value=1, required=False)
    sort_by = serializers.ChoiceField(
        choices=['expense_date', 'amount', 'created_at'],
        required=False
    )
    sort_order = serializers.ChoiceField(choices=['asc', 'desc'], required=False)

    def validate(self, attrs):
        """Validate date range."""
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')

        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })

        return attrs


class ExpenseSummaryQuerySerializer(serializers.Serializer):
    plan_id = serializers.UUIDField()


# =============================================================================
# Output Serializers
# =============================================================================

class ExpenseParticipantSerializer(serializers.ModelSerializer):
    """Serializer for participant shares."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = ExpenseParticipant
        fields = [
            'id',
            'expense',
            'user',
            'amount',
            'is_paid',
            'paid_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    """Main serializer for expenses."""

    payer = UserMinimalSerializer(read_only=True)
    participants = ExpenseParticipantSerializer(many=True, read_only=True)
    summary = serializers.SerializerMethodField()

    class Meta:
        model = Expense
        fields = [
            'id',
            'plan',
            'payer',
            'amount',
            'currency',
            'category',
            'description',
            'expense_date',
            'split_type',
            'location_id',
            'participants',
            'summary',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_summary(self, obj):
        overview = obj.get_settlement_overview()
        overview['total_amount'] = str(overview['total_amount'])
        return overview


class PaginationMetaSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    total = serializers.IntegerField()
    total_pages = serializers.IntegerField()


class ExpenseListResponseSerializer(serializers.Serializer):
    meta = PaginationMetaSerializer()
    data = ExpenseSerializer(many=True)


class CategoryBreakdownSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=ExpenseCategory.choices)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    count = serializers.IntegerField()


class PayerBreakdownSerializer(serializers.Serializer):
    payer_id = serializers.UUIDField()
    payer_name = serializers.CharField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    count = serializers.IntegerField()


class SettlementEntrySerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    user_name = serializers.CharField()
    total_paid = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_owed = serializers.DecimalField(max_digits=12, decimal_places=2)
    net_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class BudgetComparisonSerializer(serializers.Serializer):
    budget_min = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    budget_max = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    actual_spent = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentage_used = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    is_over_budget = serializers.BooleanField()


class ExpenseSummarySerializer(serializers.Serializer):
    """Serializer for a plan's expense summary."""

    plan_id = serializers.UUIDField()
    total_expenses = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    by_category = CategoryBreakdownSerializer(many=True)
    by_payer = PayerBreakdownSerializer(many=True)
    settlement = SettlementEntrySerializer(many=True)
    budget_comparison = BudgetComparisonSerializer(allow_null=True)
