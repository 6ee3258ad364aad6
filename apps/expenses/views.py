from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    ExpenseSerializer,
    ExpenseParticipantSerializer,
    ExpenseSummarySerializer,
    ExpenseListResponseSerializer,
    # Input serializers
    ExpenseCreateSerializer,
    ExpenseUpdateSerializer,
    ExpenseFilterSerializer,
    ExpenseSummaryQuerySerializer,
)
from .services import (
    create_expense,
    get_expense,
    get_expenses,
    update_expense,
    delete_expense,
    settle_expense,
    get_expense_summary,
)


UUID_PATTERN = '[0-9a-fA-F-]{36}'

LIST_FILTER_KEYS = (
    'plan_id',
    'payer_id',
    'category',
    'split_type',
    'start_date',
    'end_date',
    'search_term',
)


class ExpenseViewSet(viewsets.ViewSet):
    """
    ViewSet for trip expenses.

    All business logic is handled by services; domain exceptions are DRF
    APIExceptions and map to 400/403/404 on their own.

    list: Expenses visible to the user (filterable, paginated)
    create: Record an expense and split it
    retrieve: Get a specific expense
    partial_update: Patch an expense (payer or plan manager)
    destroy: Delete an expense (payer or plan manager)
    summary: Category/payer totals, balances and budget for a plan
    settle: Mark a participant's share as paid
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(
        parameters=[ExpenseFilterSerializer],
        responses={200: ExpenseListResponseSerializer},
        tags=['expenses'],
    )
    def list(self, request):
        """GET /api/expenses/"""
        filter_serializer = ExpenseFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        result = get_expenses(
            user=request.user,
            filters={key: params[key] for key in LIST_FILTER_KEYS if key in params},
            page=params.get('page'),
            limit=params.get('limit'),
            sort_by=params.get('sort_by'),
            sort_order=params.get('sort_order'),
        )

        return Response({
            'meta': result['meta'],
            'data': ExpenseSerializer(result['data'], many=True).data,
        })

    @extend_schema(
        request=ExpenseCreateSerializer,
        responses={201: ExpenseSerializer},
        tags=['expenses'],
    )
    def create(self, request):
        """POST /api/expenses/"""
        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        expense = create_expense(user=request.user, **serializer.validated_data)

        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ExpenseSerializer}, tags=['expenses'])
    def retrieve(self, request, pk=None):
        """GET /api/expenses/{id}/"""
        expense = get_expense(user=request.user, expense_id=pk)
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(
        request=ExpenseUpdateSerializer,
        responses={200: ExpenseSerializer},
        tags=['expenses'],
    )
    def partial_update(self, request, pk=None):
        """PATCH /api/expenses/{id}/"""
        serializer = ExpenseUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        expense = update_expense(
            user=request.user,
            expense_id=pk,
            data=serializer.validated_data,
        )

        return Response(ExpenseSerializer(expense).data)

    @extend_schema(responses={204: None}, tags=['expenses'])
    def destroy(self, request, pk=None):
        """DELETE /api/expenses/{id}/"""
        delete_expense(user=request.user, expense_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[ExpenseSummaryQuerySerializer],
        responses={200: ExpenseSummarySerializer},
        tags=['expenses'],
    )
    @action(detail=False, methods=['get'])
    def summary(self, request):
        """
        Expense summary for a plan.

        GET /api/expenses/summary/?plan_id={uuid}
        """
        query_serializer = ExpenseSummaryQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        summary = get_expense_summary(
            user=request.user,
            plan_id=query_serializer.validated_data['plan_id'],
        )

        return Response(ExpenseSummarySerializer(summary).data)

    @extend_schema(
        request=None,
        parameters=[OpenApiParameter('participant_id', str, OpenApiParameter.PATH)],
        responses={200: ExpenseParticipantSerializer},
        tags=['expenses'],
    )
    @action(
        detail=True,
        methods=['patch'],
        url_path=f'settle/(?P<participant_id>{UUID_PATTERN})',
    )
    def settle(self, request, pk=None, participant_id=None):
        """
        Mark a participant's share as paid.

        PATCH /api/expenses/{id}/settle/{participant_id}/
        """
        participant = settle_expense(
            user=request.user,
            expense_id=pk,
            participant_id=participant_id,
        )

        return Response(ExpenseParticipantSerializer(participant).data)
