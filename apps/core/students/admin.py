from django.contrib import admin

from apps.core.fees.models import MonthlyPayment

from .models import Student


class MonthlyPaymentInline(admin.TabularInline):
    model = MonthlyPayment
    extra = 0
    fields = ('month_index', 'month', 'amount', 'status', 'paid_on')
    readonly_fields = ('month_index', 'month', 'amount')


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = (
        'student_code',
        'name',
        'grade',
        'payment_type',
        'annual_fee',
        'registration_date',
    )
    list_filter = ('payment_type', 'grade', 'gender')
    search_fields = ('student_code', 'name', 'personal_id', 'contact_number')
    inlines = [MonthlyPaymentInline]
