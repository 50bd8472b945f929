import django.core.validators
import django.db.models.deletion
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models

STATUS_CHOICES = [('ACTIVE', 'Active'), ('BROKEN', 'Broken'), ('REPAIRED', 'Repaired'), ('DECOMMISSIONED', 'Decommissioned')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('periods', '0001_initial'),
        ('sections', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Asset',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('category', models.CharField(choices=[('MOTOR', 'Motor'), ('COUNTER', 'Electricity Meter'), ('ENGINE', 'Engine / Generator'), ('OTHER', 'Other')], default='OTHER', max_length=20)),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='ACTIVE', max_length=20)),
                ('is_new_purchase', models.BooleanField(default=False, help_text='Bought during a period (posts an ASSET_PURCHASE expense)')),
                ('purchase_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='created_assets', to=settings.AUTH_USER_MODEL)),
                ('purchase_period', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='purchased_assets', to='periods.period')),
                ('section', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assets', to='sections.section')),
            ],
            options={
                'db_table': 'assets',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='AssetHistory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('old_status', models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ('new_status', models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ('changed_at', models.DateTimeField(auto_now_add=True)),
                ('asset', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='history', to='assets.asset')),
                ('changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='asset_changes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'asset_history',
                'ordering': ['-changed_at'],
            },
        ),
        migrations.CreateModel(
            name='TechnicalIncident',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.TextField(validators=[django.core.validators.MinLengthValidator(5)])),
                ('requires_expense', models.BooleanField(default=False)),
                ('resolved', models.BooleanField(db_index=True, default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('asset', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='incidents', to='assets.asset')),
                ('linked_period', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='incidents', to='periods.period')),
                ('reported_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='reported_incidents', to=settings.AUTH_USER_MODEL)),
                ('section', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='incidents', to='sections.section')),
            ],
            options={
                'db_table': 'technical_incidents',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['section', 'resolved'], name='incident_section_resolved_idx')],
            },
        ),
    ]
