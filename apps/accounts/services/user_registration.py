"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole
from .exceptions import UserRegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    role: str = UserRole.COUPLE
) -> User:
    """
    Register a new planner account.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name
        role: couple or vendor (admins are created through the admin site)

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken or the role is not allowed
    """
    if role == UserRole.ADMIN:
        raise UserRegistrationError("Admin accounts cannot self-register")

    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("An account with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name,
            role=role,
        )
    except IntegrityError:
        raise UserRegistrationError("An account with this email already exists")

    logger.info("Registered %s account %s", role, user.id)
    return user
