import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

logger = logging.getLogger(__name__)


def get_guest_user():
    user_model = get_user_model()
    user, created = user_model.objects.get_or_create(
        username=settings.HOPE_GUEST_USERNAME,
        defaults={'role': user_model.ROLE_GUEST},
    )
    if created:
        user.set_unusable_password()
        user.save(update_fields=['password'])
        logger.info('Created shared guest account %s', user.username)
    elif user.role != user_model.ROLE_GUEST:
        raise ValidationError('The configured guest username belongs to a non-guest account.')
    return user


@transaction.atomic
def update_account_settings(*, user, new_username, profile_pic_url='', new_password=''):
    """
    Apply the account settings form. Returns True when the credentials changed
    and the caller has to sign the user in again.
    """
    if not user.is_admin:
        raise ValidationError('Only the administrator can change account settings.')

    new_username = (new_username or '').strip()
    if not new_username:
        raise ValidationError('New username is required.')

    user_model = get_user_model()
    if user_model.objects.exclude(pk=user.pk).filter(username__iexact=new_username).exists():
        raise ValidationError('That username is already taken.')

    credentials_changed = False
    updates = []

    if new_username != user.username:
        user.username = new_username
        updates.append('username')
        credentials_changed = True

    profile_pic_url = (profile_pic_url or '').strip()
    if profile_pic_url != user.profile_pic_url:
        user.profile_pic_url = profile_pic_url
        updates.append('profile_pic_url')

    if new_password:
        user.set_password(new_password)
        updates.append('password')
        credentials_changed = True

    if updates:
        user.save(update_fields=updates)
        logger.info('Account settings updated for user %s (%s)', user.pk, ', '.join(updates))

    return credentials_changed
