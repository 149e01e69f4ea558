from django.contrib import admin

from .models import MonthlyPayment


@admin.register(MonthlyPayment)
class MonthlyPaymentAdmin(admin.ModelAdmin):
    list_display = ('student', 'month_index', 'month', 'amount', 'status', 'paid_on')
    list_filter = ('status',)
    search_fields = ('student__student_code', 'student__name', 'month')
