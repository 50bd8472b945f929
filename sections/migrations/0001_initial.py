import django.core.validators
import django.db.models.deletion
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('periods', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Section',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('status', models.CharField(choices=[('EMPTY', 'Empty'), ('PREPARING', 'Preparing'), ('ACTIVE', 'Active'), ('PARTIAL_OUT', 'Partially Sold'), ('CLEANING', 'Cleaning')], db_index=True, default='EMPTY', max_length=20)),
                ('chick_arrival_date', models.DateTimeField(blank=True, null=True)),
                ('expected_end_date', models.DateTimeField(blank=True, null=True)),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('is_archived', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('active_period', models.ForeignKey(blank=True, help_text='Period new batches and costs are booked against', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='active_sections', to='periods.period')),
                ('assigned_workers', models.ManyToManyField(blank=True, related_name='assigned_sections', to=settings.AUTH_USER_MODEL)),
                ('periods', models.ManyToManyField(blank=True, help_text='Every period this section has been assigned to', related_name='sections', to='periods.period')),
            ],
            options={
                'db_table': 'sections',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Batch',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(blank=True, max_length=100)),
                ('started_at', models.DateTimeField()),
                ('expected_end_at', models.DateTimeField()),
                ('ended_at', models.DateTimeField(blank=True, null=True)),
                ('total_chicks_in', models.PositiveIntegerField(help_text='Chicks placed on arrival')),
                ('total_chicks_out', models.PositiveIntegerField(default=0, help_text='Chicks loaded out by any chick-out, complete or not')),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('PARTIAL_OUT', 'Partially Sold'), ('CLOSED', 'Closed')], db_index=True, default='ACTIVE', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='created_batches', to=settings.AUTH_USER_MODEL)),
                ('period', models.ForeignKey(blank=True, help_text="Copied from the section's active period at creation", null=True, on_delete=django.db.models.deletion.PROTECT, related_name='batches', to='periods.period')),
                ('section', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='batches', to='sections.section')),
            ],
            options={
                'db_table': 'batches',
                'ordering': ['-started_at'],
                'indexes': [models.Index(fields=['period', 'status'], name='batch_period_status_idx')],
                'constraints': [models.UniqueConstraint(condition=models.Q(('status__in', ['ACTIVE', 'PARTIAL_OUT'])), fields=('section',), name='one_open_batch_per_section')],
            },
        ),
        migrations.AddField(
            model_name='section',
            name='active_batch',
            field=models.ForeignKey(blank=True, help_text='Open batch currently housed here', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='sections.batch'),
        ),
        migrations.CreateModel(
            name='ChickOut',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateTimeField()),
                ('count', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('vehicle_number', models.CharField(max_length=50)),
                ('machine_number', models.CharField(blank=True, max_length=50)),
                ('is_final', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('INCOMPLETE', 'Incomplete'), ('COMPLETE', 'Complete')], db_index=True, default='INCOMPLETE', max_length=20)),
                ('total_weight_kg', models.DecimalField(blank=True, decimal_places=3, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('waste_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('100'))])),
                ('net_weight_kg', models.DecimalField(blank=True, decimal_places=3, max_digits=12, null=True)),
                ('price_per_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('total_revenue', models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='chick_outs', to='sections.batch')),
                ('completed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='completed_chick_outs', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='created_chick_outs', to=settings.AUTH_USER_MODEL)),
                ('section', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='chick_outs', to='sections.section')),
            ],
            options={
                'db_table': 'chick_outs',
                'ordering': ['-date'],
                'indexes': [
                    models.Index(fields=['batch', 'status'], name='chickout_batch_status_idx'),
                    models.Index(fields=['section', 'date'], name='chickout_section_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DailyBalance',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField(help_text='UTC calendar day')),
                ('start_of_day_chicks', models.PositiveIntegerField()),
                ('deaths', models.PositiveIntegerField(default=0)),
                ('chick_out', models.PositiveIntegerField(default=0)),
                ('end_of_day_chicks', models.PositiveIntegerField()),
                ('is_closed', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_balances', to='sections.batch')),
            ],
            options={
                'db_table': 'daily_balances',
                'ordering': ['date'],
                'constraints': [models.UniqueConstraint(fields=('batch', 'date'), name='one_balance_per_batch_day')],
            },
        ),
        migrations.CreateModel(
            name='SectionDailyReport',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField()),
                ('deaths', models.PositiveIntegerField(default=0)),
                ('avg_weight_kg', models.DecimalField(blank=True, decimal_places=3, help_text='Average live weight per bird (kg)', max_digits=6, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('medicines', models.JSONField(blank=True, default=list, help_text="List of {'name': ..., 'dose': ...}")),
                ('water_litres', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('electricity_kwh', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_reports', to='sections.batch')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='daily_reports', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'section_daily_reports',
                'ordering': ['-date'],
                'constraints': [models.UniqueConstraint(fields=('batch', 'date'), name='one_report_per_batch_day')],
            },
        ),
        migrations.CreateModel(
            name='SectionReportAudit',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('previous_values', models.JSONField(default=dict)),
                ('new_values', models.JSONField(default=dict)),
                ('changed_at', models.DateTimeField(auto_now_add=True)),
                ('changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='report_audits', to=settings.AUTH_USER_MODEL)),
                ('report', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='audits', to='sections.sectiondailyreport')),
            ],
            options={
                'db_table': 'section_report_audits',
                'ordering': ['-changed_at'],
            },
        ),
    ]
