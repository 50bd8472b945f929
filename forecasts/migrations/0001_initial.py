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
        ('sections', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ForecastPrice',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('price_per_kg', models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('source', models.CharField(choices=[('MANUAL_INITIAL', 'Set by director'), ('LAST_REAL_SALE', 'Last completed chick-out')], max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('linked_chick_out', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='sections.chickout')),
                ('period', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='forecast_prices', to='periods.period')),
                ('section', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='forecast_prices', to='sections.section')),
            ],
            options={
                'db_table': 'forecast_prices',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['period', 'section', 'is_active'], name='forecast_price_scope_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('period', 'section'), name='one_active_price_per_section'),
                    models.UniqueConstraint(condition=models.Q(('is_active', True), ('section__isnull', True)), fields=('period',), name='one_active_default_price_per_period'),
                ],
            },
        ),
    ]
