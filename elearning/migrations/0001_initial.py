from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Course',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(help_text='The unique title of the course', max_length=200, unique=True, verbose_name='Course Title')),
                ('short_description', models.CharField(blank=True, help_text='Teaser shown in the cart and on the checkout page', max_length=500, verbose_name='Short Description')),
                ('price', models.DecimalField(decimal_places=2, help_text='Current catalog price in the shop currency', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Price')),
                ('status', models.CharField(choices=[('draft', 'Entwurf'), ('published', 'Veröffentlicht'), ('archived', 'Archiviert')], default='published', help_text='Only published courses can be added to a cart or bought', max_length=20, verbose_name='Status')),
                ('students_count', models.PositiveIntegerField(default=0, help_text='Number of distinct users enrolled in this course', verbose_name='Students')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
            ],
            options={
                'verbose_name': 'Course',
                'verbose_name_plural': 'Courses',
                'db_table': 'elearning_course',
                'ordering': ['title'],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Total Amount')),
                ('currency', models.CharField(max_length=3, verbose_name='Currency')),
                ('status', models.CharField(choices=[('pending', 'Offen'), ('completed', 'Abgeschlossen'), ('expired', 'Abgelaufen'), ('failed', 'Fehlgeschlagen')], default='pending', max_length=15, verbose_name='Status')),
                ('payment_method', models.CharField(help_text='Gateway that handles the payment (mock, stripe)', max_length=32, verbose_name='Payment Method')),
                ('external_session_id', models.CharField(blank=True, max_length=255, null=True, unique=True, verbose_name='Gateway Session ID')),
                ('payment_intent_id', models.CharField(blank=True, default='', max_length=255, verbose_name='Payment Intent ID')),
                ('payment_url', models.CharField(blank=True, default='', max_length=2000, verbose_name='Payment URL')),
                ('expires_at', models.DateTimeField(verbose_name='Expires At')),
                ('paid_at', models.DateTimeField(blank=True, null=True, verbose_name='Paid At')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'db_table': 'elearning_order',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user', 'status'], name='order_user_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, verbose_name='Unit Price')),
                ('quantity', models.PositiveIntegerField(default=1, verbose_name='Quantity')),
                ('course', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='order_items', to='elearning.course', verbose_name='Course')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='elearning.order', verbose_name='Order')),
            ],
            options={
                'verbose_name': 'Order Item',
                'verbose_name_plural': 'Order Items',
                'db_table': 'elearning_order_item',
                'ordering': ['order', 'id'],
                'unique_together': {('order', 'course')},
            },
        ),
        migrations.CreateModel(
            name='CartItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Quantity')),
                ('added_at', models.DateTimeField(auto_now_add=True, verbose_name='Added At')),
                ('course', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cart_items', to='elearning.course', verbose_name='Course')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cart_items', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Cart Item',
                'verbose_name_plural': 'Cart Items',
                'db_table': 'elearning_cart_item',
                'ordering': ['-added_at'],
                'unique_together': {('user', 'course')},
            },
        ),
        migrations.CreateModel(
            name='Enrollment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('source', models.CharField(choices=[('order', 'Bestellung'), ('admin_grant', 'Administrator')], default='order', max_length=20, verbose_name='Source')),
                ('status', models.CharField(choices=[('active', 'Aktiv'), ('completed', 'Abgeschlossen')], default='active', max_length=15, verbose_name='Status')),
                ('progress_percentage', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)], verbose_name='Progress (%)')),
                ('started_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Started At')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='Completed At')),
                ('certificate_url', models.CharField(blank=True, default='', max_length=1000, verbose_name='Certificate URL')),
                ('course', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='enrollments', to='elearning.course', verbose_name='Course')),
                ('order', models.ForeignKey(blank=True, help_text='Order that paid for this access, empty for administrative grants', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='enrollments', to='elearning.order', verbose_name='Order')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='enrollments', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Enrollment',
                'verbose_name_plural': 'Enrollments',
                'db_table': 'elearning_enrollment',
                'ordering': ['-started_at'],
                'constraints': [models.UniqueConstraint(fields=('user', 'course'), name='unique_enrollment_per_user_course')],
            },
        ),
    ]
