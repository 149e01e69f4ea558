import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.utils.crypto import constant_time_compare

logger = logging.getLogger(__name__)


class SettingsAdminBackend(ModelBackend):
    """
    Authenticates the administrator configured through HOPE_ADMIN_USERNAME and
    HOPE_ADMIN_PASSWORD. The username comparison is case-insensitive. The
    matching user row is created on first login so sessions, audit entries and
    account settings have something to point at.
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        if username is None or password is None:
            return None

        admin_username = settings.HOPE_ADMIN_USERNAME
        if username.strip().lower() != admin_username.lower():
            return None
        if not constant_time_compare(password, settings.HOPE_ADMIN_PASSWORD):
            return None

        user_model = get_user_model()
        user = user_model.objects.filter(username__iexact=admin_username).first()
        if user is None:
            user = user_model(username=admin_username, role=user_model.ROLE_ADMIN, is_staff=True)
            user.set_password(password)
            user.save()
            logger.info('Created administrator account %s', admin_username)
        elif user.role != user_model.ROLE_ADMIN:
            return None

        if not self.user_can_authenticate(user):
            return None
        return user
