import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MonthlyPayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('month_index', models.PositiveSmallIntegerField()),
                ('month', models.CharField(max_length=40)),
                ('amount', models.DecimalField(decimal_places=4, max_digits=14)),
                ('status', models.CharField(choices=[('Paid', 'Paid'), ('Unpaid', 'Unpaid')], default='Unpaid', max_length=10)),
                ('paid_on', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='monthly_payments', to='students.student')),
            ],
            options={
                'ordering': ['student_id', 'month_index'],
                'indexes': [models.Index(fields=['status'], name='monthly_payment_status_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('student', 'month_index'), name='unique_monthly_payment_per_student_month'),
                    models.CheckConstraint(condition=models.Q(('month_index__lt', 12)), name='monthly_payment_index_in_year'),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(('paid_on__isnull', False), ('status', 'Paid')),
                            models.Q(('paid_on__isnull', True), ('status', 'Unpaid')),
                            _connector='OR',
                        ),
                        name='monthly_payment_paid_on_matches_status',
                    ),
                ],
            },
        ),
    ]
