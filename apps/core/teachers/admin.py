from django.contrib import admin

from .models import Teacher


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ('teacher_code', 'name', 'subject', 'grade', 'hire_date')
    list_filter = ('subject', 'grade')
    search_fields = ('teacher_code', 'name', 'subject', 'email')
