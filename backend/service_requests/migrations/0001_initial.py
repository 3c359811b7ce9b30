import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ServiceRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('issue_type', models.CharField(choices=[('FLAT_TIRE', 'Flat tire'), ('ENGINE_FAILURE', 'Engine failure'), ('BATTERY_DEAD', 'Dead battery'), ('OUT_OF_FUEL', 'Out of fuel'), ('LOCKED_OUT', 'Locked out'), ('ACCIDENT', 'Accident'), ('OTHER', 'Other')], max_length=20)),
                ('description', models.TextField(blank=True, max_length=1000)),
                ('latitude', models.DecimalField(decimal_places=8, max_digits=10)),
                ('longitude', models.DecimalField(decimal_places=8, max_digits=11)),
                ('address', models.CharField(blank=True, max_length=500)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('ACCEPTED', 'Accepted'), ('IN_PROGRESS', 'In progress'), ('COMPLETED', 'Completed'), ('CANCELLED', 'Cancelled')], default='PENDING', max_length=20)),
                ('estimated_arrival', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('accepted_at', models.DateTimeField(blank=True, null=True)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('version', models.PositiveIntegerField(default=0)),
                ('mechanic', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='assigned_service_requests', to=settings.AUTH_USER_MODEL)),
                ('requester', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='service_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'service_requests',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', 'created_at'], name='service_req_status_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status__in', ['PENDING', 'ACCEPTED', 'IN_PROGRESS'])), fields=('requester',), name='one_active_request_per_requester'),
                    models.CheckConstraint(condition=models.Q(models.Q(('mechanic__isnull', True), ('status__in', ['PENDING', 'CANCELLED'])), models.Q(('mechanic__isnull', False), ('status__in', ['ACCEPTED', 'IN_PROGRESS', 'COMPLETED'])), _connector='OR'), name='mechanic_assigned_iff_working'),
                ],
            },
        ),
    ]
