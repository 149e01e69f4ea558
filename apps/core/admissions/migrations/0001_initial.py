import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
        ('teachers', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StudentApplication',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=120)),
                ('photo_url', models.URLField(blank=True, max_length=500)),
                ('grade', models.PositiveSmallIntegerField()),
                ('age', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('payment_type', models.CharField(choices=[('Monthly', 'Monthly'), ('Yearly', 'Yearly')], default='Monthly', max_length=10)),
                ('annual_fee', models.DecimalField(decimal_places=2, help_text='Total fee for the year. Monthly plans split it into 12 equal payments.', max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('student_code', models.CharField(max_length=50, verbose_name='Student ID')),
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
                ('application_id', models.CharField(editable=False, max_length=40, unique=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('declined', 'Declined')], default='pending', max_length=10)),
                ('submitted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('decided_at', models.DateTimeField(blank=True, null=True)),
                ('decided_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('created_student', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='applications', to='students.student')),
            ],
            options={
                'ordering': ['-submitted_at', '-id'],
                'indexes': [models.Index(fields=['status', 'submitted_at'], name='student_app_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='TeacherApplication',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=120)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('subject', models.CharField(max_length=120)),
                ('hire_date', models.DateField(blank=True, null=True)),
                ('age', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('grade', models.PositiveSmallIntegerField()),
                ('teacher_code', models.CharField(max_length=50, verbose_name='Teacher ID')),
                ('application_id', models.CharField(editable=False, max_length=40, unique=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('declined', 'Declined')], default='pending', max_length=10)),
                ('submitted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('decided_at', models.DateTimeField(blank=True, null=True)),
                ('decided_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('created_teacher', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='applications', to='teachers.teacher')),
            ],
            options={
                'ordering': ['-submitted_at', '-id'],
                'indexes': [models.Index(fields=['status', 'submitted_at'], name='teacher_app_status_idx')],
            },
        ),
    ]
