import django.core.validators
import django.db.models.deletion
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('assets', '0001_initial'),
        ('periods', '0001_initial'),
        ('sections', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PeriodExpense',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('category', models.CharField(choices=[('ELECTRICITY', 'Electricity'), ('WATER', 'Water'), ('FEED', 'Feed'), ('MEDICINE', 'Medicine'), ('LABOR_FIXED', 'Labor (Fixed Salary)'), ('LABOR_DAILY', 'Labor (Daily)'), ('MAINTENANCE', 'Maintenance'), ('TRANSPORT', 'Transport'), ('ASSET_PURCHASE', 'Asset Purchase'), ('ASSET_REPAIR', 'Asset Repair'), ('OTHER', 'Other')], db_index=True, max_length=20)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=16, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('quantity', models.DecimalField(blank=True, decimal_places=3, help_text='Units consumed (kg, litres, kWh...)', max_digits=12, null=True)),
                ('unit_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('description', models.CharField(blank=True, max_length=500)),
                ('expense_date', models.DateField()),
                ('source', models.CharField(choices=[('MANUAL', 'Manual Entry'), ('DAILY_REPORT', 'Daily Report')], default='MANUAL', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('asset', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='expenses', to='assets.asset')),
                ('batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='expenses', to='sections.batch')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='period_expenses', to=settings.AUTH_USER_MODEL)),
                ('daily_report', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='expenses', to='sections.sectiondailyreport')),
                ('incident', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='expenses', to='assets.technicalincident')),
                ('period', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='expenses', to='periods.period')),
                ('section', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='expenses', to='sections.section')),
            ],
            options={
                'db_table': 'period_expenses',
                'ordering': ['-expense_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['period', 'category'], name='expense_period_category_idx'),
                    models.Index(fields=['period', 'section'], name='expense_period_section_idx'),
                ],
            },
        ),
    ]
