from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.db import models


class UserManager(DjangoUserManager):
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', 'admin')
        return super().create_superuser(username, email=email, password=password, **extra_fields)


class User(AbstractUser):
    ROLE_ADMIN = 'admin'
    ROLE_GUEST = 'guest'

    ROLE_CHOICES = (
        (ROLE_ADMIN, 'Admin'),
        (ROLE_GUEST, 'Guest'),
    )

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_GUEST)
    profile_pic_url = models.URLField(max_length=500, blank=True)

    objects = UserManager()

    class Meta:
        indexes = [
            models.Index(fields=['role'], name='users_user_role_idx'),
        ]

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_guest(self):
        return self.role == self.ROLE_GUEST

    def save(self, *args, **kwargs):
        if self.is_superuser and self.role != self.ROLE_ADMIN:
            self.role = self.ROLE_ADMIN

        if self.role == self.ROLE_GUEST:
            self.profile_pic_url = ''

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.username} ({self.role})"


class AuditLog(models.Model):
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True
    )

    action = models.CharField(max_length=100)
    target_model = models.CharField(max_length=100, blank=True)
    target_id = models.CharField(max_length=64, blank=True)
    details = models.TextField(blank=True)

    method = models.CharField(max_length=10, blank=True)
    path = models.CharField(max_length=255, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='auditlog_user_created_idx'),
            models.Index(fields=['action'], name='auditlog_action_idx'),
        ]

    def __str__(self):
        return f"{self.action} by {self.user_id or 'system'}"
