"""User registration service."""

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model
import structlog

from .exceptions import UserRegistrationError

User = get_user_model()
logger = structlog.get_logger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = ""
) -> User:
    """
    Register a new business owner account.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already taken
    """
    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name
        )
    except IntegrityError:
        raise UserRegistrationError("An account with this email already exists")

    logger.info('user_registered', user_id=str(user.id))
    return user
