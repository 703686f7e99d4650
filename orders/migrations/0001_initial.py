import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('total', models.DecimalField(
                    decimal_places=2,
                    max_digits=10,
                    validators=[django.core.validators.MinValueValidator(Decimal('0.00'))],
                )),
                ('payment_method', models.CharField(
                    choices=[('cash', 'Cash'), ('debit', 'Debit'), ('ewallet', 'E-Wallet')],
                    max_length=10,
                )),
                ('status', models.CharField(
                    choices=[('pending', 'Pending'), ('completed', 'Completed'), ('cancelled', 'Cancelled')],
                    default='pending',
                    max_length=10,
                )),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_at'], name='idx_orders_created_at'),
                    models.Index(fields=['status'], name='idx_orders_status'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(total__gte=0), name='order_total_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_id', models.CharField(max_length=64)),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('position', models.PositiveSmallIntegerField(default=0)),
                ('order', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='items',
                    to='orders.order',
                )),
            ],
            options={
                'db_table': 'order_items',
                'ordering': ['position'],
                'indexes': [models.Index(fields=['item_id'], name='idx_order_items_item_id')],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(quantity__gte=1), name='order_item_quantity_positive'),
                ],
            },
        ),
    ]
