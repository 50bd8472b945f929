import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('expenses', '0001_initial'),
        ('periods', '0001_initial'),
        ('sections', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FeedDelivery',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('feed_type', models.CharField(choices=[('BROILER_STARTER', 'Broiler Starter (0-3 weeks)'), ('BROILER_GROWER', 'Broiler Grower'), ('BROILER_FINISHER', 'Broiler Finisher (4+ weeks)'), ('SUPPLEMENT', 'Supplement/Premix'), ('OTHER', 'Other')], default='OTHER', max_length=20)),
                ('quantity_kg', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.10'))])),
                ('unit_price', models.DecimalField(decimal_places=2, help_text='Price per kg', max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('total_cost', models.DecimalField(decimal_places=2, max_digits=18)),
                ('supplier', models.CharField(blank=True, max_length=200)),
                ('delivered_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='feed_deliveries', to='sections.batch')),
                ('delivered_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('expense', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='feed_delivery', to='expenses.periodexpense')),
                ('period', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='feed_deliveries', to='periods.period')),
                ('section', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='feed_deliveries', to='sections.section')),
            ],
            options={
                'verbose_name_plural': 'Feed deliveries',
                'db_table': 'feed_deliveries',
                'ordering': ['-delivered_at'],
                'indexes': [
                    models.Index(fields=['section', '-delivered_at'], name='feed_section_delivered_idx'),
                    models.Index(fields=['period'], name='feed_period_idx'),
                ],
            },
        ),
    ]
