import django.core.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=120)),
                ('photo_url', models.URLField(blank=True, max_length=500)),
                ('grade', models.PositiveSmallIntegerField()),
                ('age', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('payment_type', models.CharField(choices=[('Monthly', 'Monthly'), ('Yearly', 'Yearly')], default='Monthly', max_length=10)),
                ('annual_fee', models.DecimalField(decimal_places=2, help_text='Total fee for the year. Monthly plans split it into 12 equal payments.', max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('personal_id', models.CharField(max_length=50)),
                ('date_of_birth', models.DateField()),
                ('registration_date', models.DateField(default=django.utils.timezone.localdate)),
                ('years_of_enroll', models.PositiveSmallIntegerField(default=0)),
                ('parent_name', models.CharField(max_length=120)),
                ('gender', models.CharField(choices=[('Male', 'Male'), ('Female', 'Female'), ('Other', 'Other')], max_length=10)),
                ('nationality', models.CharField(max_length=80)),
                ('religion', models.CharField(max_length=80)),
                ('can_transfer_certificate', models.BooleanField(default=False)),
                ('address', models.TextField()),
                ('contact_number', models.CharField(max_length=20, validators=[django.core.validators.RegexValidator(message='Invalid contact number format.', regex='^\\+?[0-9\\s-]+$')])),
                ('church_name', models.CharField(blank=True, default='N/A', max_length=120)),
                ('student_code', models.CharField(max_length=50, unique=True, verbose_name='Student ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['name', 'id'],
                'indexes': [
                    models.Index(fields=['payment_type'], name='student_payment_type_idx'),
                    models.Index(fields=['registration_date'], name='student_registration_idx'),
                    models.Index(fields=['grade'], name='student_grade_idx'),
                ],
            },
        ),
    ]
