import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.expenses.models import Expense, ExpenseParticipant, SplitType


def expense_payload(plan, payer, **overrides):
    data = {
        'plan_id': str(plan.id),
        'payer_id': str(payer.id),
        'amount': '10.00',
        'category': 'FOOD',
        'expense_date': '2025-06-02',
        'split_type': 'EQUAL',
    }
    data.update(overrides)
    return data


@pytest.fixture
def owner_client(client_for, owner):
    return client_for(owner)


@pytest.fixture
def member_client(client_for, member):
    return client_for(member)


@pytest.fixture
def outsider_client(client_for, outsider):
    return client_for(outsider)


@pytest.fixture
def expense(owner_client, plan, owner):
    """EQUAL expense of 30.00 created through the API."""
    response = owner_client.post(
        reverse('expenses:expense-list'),
        expense_payload(plan, owner, amount='30.00'),
        format='json',
    )
    return Expense.objects.get(id=response.data['id'])


# =============================================================================
# Create
# =============================================================================

@pytest.mark.django_db
class TestExpenseCreate:
    """Tests for POST /api/expenses/"""

    def test_create_equal_split(self, owner_client, plan, owner):
        response = owner_client.post(
            reverse('expenses:expense-list'),
            expense_payload(plan, owner),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['amount'] == '10.00'
        assert response.data['currency'] == 'USD'
        assert response.data['payer']['display_name'] == 'Alice'
        assert [p['amount'] for p in response.data['participants']] == ['3.33', '3.33', '3.33']
        assert response.data['summary'] == {
            'total_amount': '10.00',
            'participant_count': 3,
            'settled_count': 0,
            'is_fully_settled': False,
        }

    def test_create_custom_split(self, owner_client, plan, owner, member):
        response = owner_client.post(
            reverse('expenses:expense-list'),
            expense_payload(
                plan, owner,
                amount='50.00',
                split_type='CUSTOM',
                participants=[
                    {'user_id': str(owner.id), 'amount': '20.00'},
                    {'user_id': str(member.id), 'amount': '30.00'},
                ],
            ),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['split_type'] == SplitType.CUSTOM
        assert len(response.data['participants']) == 2

    def test_create_percentage_split(self, owner_client, plan, owner, member):
        response = owner_client.post(
            reverse('expenses:expense-list'),
            expense_payload(
                plan, owner,
                amount='80.00',
                split_type='PERCENTAGE',
                participants=[
                    {'user_id': str(owner.id), 'percentage': '75'},
                    {'user_id': str(member.id), 'percentage': '25'},
                ],
            ),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        amounts = {p['user']['id']: p['amount'] for p in response.data['participants']}
        assert amounts == {str(owner.id): '60.00', str(member.id): '20.00'}

    def test_create_percentage_split_from_float_thirds(
        self, owner_client, plan, owner, member, other_member
    ):
        third = 100 / 3
        response = owner_client.post(
            reverse('expenses:expense-list'),
            expense_payload(
                plan, owner,
                amount='90.00',
                split_type='PERCENTAGE',
                participants=[
                    {'user_id': str(owner.id), 'percentage': third},
                    {'user_id': str(member.id), 'percentage': third},
                    {'user_id': str(other_member.id), 'percentage': third},
                ],
            ),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert [p['amount'] for p in response.data['participants']] == ['30.00', '30.00', '30.00']

    def test_custom_amounts_limited_to_cents(self, owner_client, plan, owner, member):
        response = owner_client.post(
            reverse('expenses:expense-list'),
            expense_payload(
                plan, owner,
                split_type='CUSTOM',
                participants=[
                    {'user_id': str(owner.id), 'amount': '6.665'},
                    {'user_id': str(member.id), 'amount': '3.335'},
                ],
            ),
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'participants' in response.data

    def test_blank_description_stored_as_null(self, owner_client, plan, owner):
        response = owner_client.post(
            reverse('expenses:expense-list'),
            expense_payload(plan, owner, description=''),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Expense.objects.get(id=response.data['id']).description is None

    def test_split_mismatch_is_bad_request(self, owner_client, plan, owner, member):
        response = owner_client.post(
            reverse('expenses:expense-list'),
            expense_payload(
                plan, owner,
                amount='50.00',
                split_type='CUSTOM',
                participants=[
                    {'user_id': str(owner.id), 'amount': '20.00'},
                    {'user_id': str(member.id), 'amount': '20.00'},
                ],
            ),
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'must equal' in response.data['detail']

    def test_date_outside_plan_is_bad_request(self, owner_client, plan, owner):
        response = owner_client.post(
            reverse('expenses:expense-list'),
            expense_payload(plan, owner, expense_date='2025-08-01'),
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['detail'].code == 'invalid_expense_date'

    @pytest.mark.parametrize('field,value', [
        ('amount', '0'),
        ('amount', '-1.00'),
        ('category', 'LUXURY'),
        ('split_type', 'RANDOM'),
        ('plan_id', 'not-a-uuid'),
        ('currency', 'X' * 11),
        ('description', 'x' * 1001),
    ])
    def test_input_validation(self, owner_client, plan, owner, field, value):
        response = owner_client.post(
            reverse('expenses:expense-list'),
            expense_payload(plan, owner, **{field: value}),
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data

    def test_outsider_forbidden(self, outsider_client, plan, owner):
        response = outsider_client.post(
            reverse('expenses:expense-list'),
            expense_payload(plan, owner),
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_plan_not_found(self, owner_client, owner):
        response = owner_client.post(
            reverse('expenses:expense-list'),
            {
                'plan_id': str(uuid4()),
                'payer_id': str(owner.id),
                'amount': '10.00',
                'category': 'FOOD',
                'expense_date': '2025-06-02',
                'split_type': 'EQUAL',
            },
            format='json',
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_unauthenticated(self, api_client, plan, owner):
        response = api_client.post(
            reverse('expenses:expense-list'),
            expense_payload(plan, owner),
            format='json',
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Read
# =============================================================================

@pytest.mark.django_db
class TestExpenseList:
    """Tests for GET /api/expenses/"""

    def test_list_with_meta(self, member_client, expense):
        response = member_client.get(reverse('expenses:expense-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['meta'] == {'page': 1, 'limit': 10, 'total': 1, 'total_pages': 1}
        assert response.data['data'][0]['id'] == str(expense.id)

    def test_outsider_sees_nothing(self, outsider_client, expense):
        response = outsider_client.get(reverse('expenses:expense-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['meta']['total'] == 0

    def test_plan_filter_forbidden_for_outsider(self, outsider_client, plan, expense):
        response = outsider_client.get(reverse('expenses:expense-list'), {'plan_id': str(plan.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_pagination_params(self, owner_client, plan, owner, expense):
        owner_client.post(reverse('expenses:expense-list'), expense_payload(plan, owner), format='json')

        response = owner_client.get(reverse('expenses:expense-list'), {'page': 2, 'limit': 1})

        assert response.data['meta'] == {'page': 2, 'limit': 1, 'total': 2, 'total_pages': 2}
        assert len(response.data['data']) == 1

    def test_invalid_date_range(self, owner_client):
        response = owner_client.get(
            reverse('expenses:expense-list'),
            {'start_date': '2025-06-05', 'end_date': '2025-06-01'},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'end_date' in response.data

    def test_invalid_sort_field(self, owner_client):
        response = owner_client.get(reverse('expenses:expense-list'), {'sort_by': 'payer'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestExpenseRetrieve:
    """Tests for GET /api/expenses/{id}/"""

    def test_member_can_retrieve(self, member_client, expense):
        response = member_client.get(reverse('expenses:expense-detail', kwargs={'pk': expense.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(expense.id)
        assert str(response.data['plan']) == str(expense.plan_id)

    def test_outsider_forbidden(self, outsider_client, expense):
        response = outsider_client.get(reverse('expenses:expense-detail', kwargs={'pk': expense.id}))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_not_found(self, owner_client):
        response = owner_client.get(reverse('expenses:expense-detail', kwargs={'pk': uuid4()}))

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Update / Delete
# =============================================================================

@pytest.mark.django_db
class TestExpenseUpdate:
    """Tests for PATCH /api/expenses/{id}/"""

    def test_amount_change_rescales_equal_split(self, owner_client, expense):
        response = owner_client.patch(
            reverse('expenses:expense-detail', kwargs={'pk': expense.id}),
            {'amount': '45.00'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert [p['amount'] for p in response.data['participants']] == ['15.00', '15.00', '15.00']

    def test_date_outside_plan(self, owner_client, expense):
        response = owner_client.patch(
            reverse('expenses:expense-detail', kwargs={'pk': expense.id}),
            {'expense_date': '2025-05-01'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_split_type_is_not_patchable(self, owner_client, expense):
        response = owner_client.patch(
            reverse('expenses:expense-detail', kwargs={'pk': expense.id}),
            {'split_type': 'CUSTOM', 'description': 'Dinner'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['split_type'] == SplitType.EQUAL
        assert response.data['description'] == 'Dinner'

    def test_non_payer_forbidden(self, member_client, expense):
        response = member_client.patch(
            reverse('expenses:expense-detail', kwargs={'pk': expense.id}),
            {'description': 'Hijacked'},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestExpenseDelete:
    """Tests for DELETE /api/expenses/{id}/"""

    def test_payer_deletes(self, owner_client, expense):
        response = owner_client.delete(reverse('expenses:expense-detail', kwargs={'pk': expense.id}))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Expense.objects.filter(id=expense.id).exists()

    def test_non_payer_forbidden(self, member_client, expense):
        response = member_client.delete(reverse('expenses:expense-detail', kwargs={'pk': expense.id}))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Expense.objects.filter(id=expense.id).exists()


# =============================================================================
# Settle / Summary
# =============================================================================

@pytest.mark.django_db
class TestExpenseSettle:
    """Tests for PATCH /api/expenses/{id}/settle/{participant_id}/"""

    def settle_url(self, expense, participant):
        return reverse(
            'expenses:expense-settle',
            kwargs={'pk': expense.id, 'participant_id': participant.id},
        )

    def test_participant_settles(self, member_client, expense, member):
        share = ExpenseParticipant.objects.get(expense=expense, user=member)

        response = member_client.patch(self.settle_url(expense, share))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_paid'] is True
        assert response.data['paid_at'] is not None

    def test_double_settle_bad_request(self, member_client, expense, member):
        share = ExpenseParticipant.objects.get(expense=expense, user=member)
        member_client.patch(self.settle_url(expense, share))

        response = member_client.patch(self.settle_url(expense, share))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['detail'].code == 'participant_already_paid'

    def test_outsider_forbidden(self, outsider_client, expense, member):
        share = ExpenseParticipant.objects.get(expense=expense, user=member)

        response = outsider_client.patch(self.settle_url(expense, share))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        share.refresh_from_db()
        assert share.is_paid is False

    def test_unknown_participant(self, member_client, expense):
        response = member_client.patch(
            reverse('expenses:expense-settle', kwargs={'pk': expense.id, 'participant_id': uuid4()})
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_fully_settled_summary(self, owner_client, expense):
        for share in expense.participants.all():
            owner_client.patch(self.settle_url(expense, share))

        response = owner_client.get(reverse('expenses:expense-detail', kwargs={'pk': expense.id}))

        assert response.data['summary']['settled_count'] == 3
        assert response.data['summary']['is_fully_settled'] is True


@pytest.mark.django_db
class TestExpenseSummary:
    """Tests for GET /api/expenses/summary/"""

    def test_summary(self, member_client, plan, expense, owner):
        response = member_client.get(reverse('expenses:expense-summary'), {'plan_id': str(plan.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_expenses'] == '30.00'
        assert response.data['by_category'] == [{'category': 'FOOD', 'total': '30.00', 'count': 1}]
        assert response.data['budget_comparison']['percentage_used'] == '3.00'
        assert response.data['budget_comparison']['is_over_budget'] is False
        nets = {row['user_id']: row['net_amount'] for row in response.data['settlement']}
        assert nets[str(owner.id)] == '-20.00'

    def test_plan_id_required(self, member_client):
        response = member_client.get(reverse('expenses:expense-summary'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'plan_id' in response.data

    def test_outsider_forbidden(self, outsider_client, plan):
        response = outsider_client.get(reverse('expenses:expense-summary'), {'plan_id': str(plan.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN
