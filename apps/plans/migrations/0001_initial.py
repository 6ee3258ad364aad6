# Generated manually for the trip expenses project

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TravelPlan',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('destination', models.CharField(blank=True, max_length=200)),
                ('visibility', models.CharField(choices=[('PUBLIC', 'Public'), ('PRIVATE', 'Private'), ('UNLISTED', 'Unlisted')], default='PRIVATE', max_length=10)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('budget_min', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('budget_max', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='owned_plans', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'travel_plans',
                'ordering': ['-start_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'created_at'], name='travel_plan_owner_i_4fa417_idx'),
                    models.Index(fields=['visibility'], name='travel_plan_visibil_f544f2_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TripMember',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('role', models.CharField(choices=[('OWNER', 'Owner'), ('ADMIN', 'Admin'), ('EDITOR', 'Editor'), ('VIEWER', 'Viewer')], default='VIEWER', max_length=10)),
                ('status', models.CharField(choices=[('INVITED', 'Invited'), ('JOINED', 'Joined'), ('LEFT', 'Left'), ('REMOVED', 'Removed')], default='INVITED', max_length=10)),
                ('joined_at', models.DateTimeField(auto_now_add=True)),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='plans.travelplan')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='trip_memberships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'trip_members',
                'ordering': ['joined_at'],
                'unique_together': {('plan', 'user')},
                'indexes': [
                    models.Index(fields=['plan', 'status'], name='trip_member_plan_id_a09976_idx'),
                    models.Index(fields=['user', 'status'], name='trip_member_user_id_fd00c3_idx'),
                ],
            },
        ),
    ]
