import logging

from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.dispatch import receiver

from apps.core.users.audit import log_audit_event

logger = logging.getLogger(__name__)


@receiver(user_logged_in)
def log_login(sender, request, user, **kwargs):
    logger.info('User %s signed in as %s', user.username, user.role)
    log_audit_event(
        request=request,
        action='user.login',
        target=user,
        user=user,
        details=f"Role={user.role}",
    )


@receiver(user_logged_out)
def log_logout(sender, request, user, **kwargs):
    if user is None:
        return

    log_audit_event(
        request=request,
        action='user.logout',
        target=user,
        user=user,
        details=f"Role={user.role}",
    )
