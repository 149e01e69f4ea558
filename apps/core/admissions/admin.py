from django.contrib import admin

from .models import StudentApplication, TeacherApplication


@admin.register(StudentApplication)
class StudentApplicationAdmin(admin.ModelAdmin):
    list_display = ('application_id', 'name', 'student_code', 'grade', 'status', 'submitted_at')
    list_filter = ('status', 'grade', 'payment_type')
    search_fields = ('application_id', 'name', 'student_code')
    readonly_fields = ('application_id', 'submitted_at', 'decided_at', 'decided_by', 'created_student')


@admin.register(TeacherApplication)
class TeacherApplicationAdmin(admin.ModelAdmin):
    list_display = ('application_id', 'name', 'teacher_code', 'subject', 'status', 'submitted_at')
    list_filter = ('status', 'subject')
    search_fields = ('application_id', 'name', 'teacher_code')
    readonly_fields = ('application_id', 'submitted_at', 'decided_at', 'decided_by', 'created_teacher')
