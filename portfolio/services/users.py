import logging
from typing import Optional

from tortoise.exceptions import IntegrityError, OperationalError

from portfolio.core.errors import AuthError, ConflictError, NotFoundError, StorageError, ValidationError
from portfolio.models.user import User
from portfolio.services.security import hash_password, verify_password

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


async def register(name: str, email: str, password: str) -> int:
    name = (name or "").strip()
    email = (email or "").strip()
    if not name or not email or not password:
        raise ValidationError("Name, email, and password are required")

    # Fast path only; the unique constraint on users.email settles races.
    try:
        exists = await User.filter(email=email).exists()
    except OperationalError as exc:
        log.error("Email lookup failed: %s", exc)
        raise StorageError("Database error") from exc
    if exists:
        raise ConflictError("Email already in use")

    try:
        user = await User.create(name=name, email=email, password_hash=hash_password(password))
    except IntegrityError:
        raise ConflictError("Email already in use")
    except OperationalError as exc:
        log.error("User insert failed: %s", exc)
        raise StorageError("Error creating user") from exc

    log.info("Registered user id=%s", user.id)
    return user.id


async def find_by_email(email: str) -> Optional[User]:
    return await User.get_or_none(email=email)


async def find_by_id(user_id: int) -> Optional[User]:
    return await User.get_or_none(id=user_id)


async def authenticate(email: str, password: str) -> User:
    """Unknown email and wrong password are indistinguishable to the caller."""
    email = (email or "").strip()
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = await find_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        log.info("Failed login attempt for %s", email)
        raise AuthError(INVALID_CREDENTIALS)
    return user


async def get_profile(user_id: int) -> User:
    user = await find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
