# Generated manually for the trip expenses project

import uuid
from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('plans', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Expense',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('currency', models.CharField(default='USD', max_length=10)),
                ('category', models.CharField(choices=[('FOOD', 'Food'), ('TRANSPORT', 'Transport'), ('ACCOMMODATION', 'Accommodation'), ('ACTIVITY', 'Activity'), ('SHOPPING', 'Shopping'), ('OTHER', 'Other')], max_length=20)),
                ('description', models.TextField(blank=True, null=True)),
                ('expense_date', models.DateField()),
                ('split_type', models.CharField(choices=[('EQUAL', 'Equal'), ('CUSTOM', 'Custom'), ('PERCENTAGE', 'Percentage')], max_length=20)),
                ('location_id', models.UUIDField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('payer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenses_paid', to=settings.AUTH_USER_MODEL)),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenses', to='plans.travelplan')),
            ],
            options={
                'db_table': 'expenses',
                'ordering': ['-expense_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['plan', 'expense_date'], name='expenses_plan_id_b5b720_idx'),
                    models.Index(fields=['payer', 'expense_date'], name='expenses_payer_i_504d21_idx'),
                    models.Index(fields=['plan', 'category'], name='expenses_plan_id_999406_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ExpenseParticipant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('is_paid', models.BooleanField(default=False)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('expense', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='participants', to='expenses.expense')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expense_shares', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'expense_participants',
                'ordering': ['created_at'],
                'unique_together': {('expense', 'user')},
                'indexes': [
                    models.Index(fields=['user', 'is_paid'], name='expense_par_user_id_640f1f_idx'),
                    models.Index(fields=['expense', 'is_paid'], name='expense_par_expense_48ce43_idx'),
                ],
            },
        ),
    ]
