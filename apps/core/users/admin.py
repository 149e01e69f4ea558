from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import AuditLog, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ('username', 'role', 'is_active', 'last_login')
    list_filter = ('role', 'is_active', 'is_superuser')
    fieldsets = DjangoUserAdmin.fieldsets + (
        ('School', {'fields': ('role', 'profile_pic_url')}),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'target_model', 'target_id', 'created_at')
    list_filter = ('action',)
    search_fields = ('action', 'target_id', 'details')
    readonly_fields = [field.name for field in AuditLog._meta.fields]
