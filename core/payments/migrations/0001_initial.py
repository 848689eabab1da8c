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
            name='ExternalCustomerRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('external_customer_id', models.CharField(help_text='Customer identifier issued by the payment gateway', max_length=255, verbose_name='External Customer ID')),
                ('gateway', models.CharField(help_text='Payment gateway that issued the identifier', max_length=32, verbose_name='Gateway')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('user', models.OneToOneField(help_text='Buyer this gateway customer belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='external_customer', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'External Customer',
                'verbose_name_plural': 'External Customers',
                'db_table': 'payments_external_customer',
            },
        ),
    ]
