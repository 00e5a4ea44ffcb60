"""
User Service - registration and profile management for recipe owners.

Usernames and emails are unique with exact comparison. Deleting a user
removes everything that depends on them: their favorites, their recipes
(through the same deletion step recipe_service uses), then the user row.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from typing import Optional

from sqlalchemy.orm import Session

from src.models.favorite import Favorite
from src.models.recipe import Recipe
from src.models.user import User
from src.services import uniqueness
from src.services.database import session_scope
from src.services.dto import UserDto, user_to_dto
from src.services.exceptions import UserNotFound, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.services.recipe_service import delete_recipe_rows
from src.utils.constants import MAX_EMAIL_LENGTH, MAX_USERNAME_LENGTH
from src.utils.validators import validate_required_string

logger = get_service_logger(__name__)


def _validate_user_fields(username: Optional[str], email: Optional[str]) -> None:
    errors = []
    for value, max_length, field_name in (
        (username, MAX_USERNAME_LENGTH, "Username"),
        (email, MAX_EMAIL_LENGTH, "Email"),
    ):
        is_valid, error = validate_required_string(value, field_name)
        if not is_valid:
            errors.append(error)
        elif len(value.strip()) > max_length:
            errors.append(f"{field_name}: Must be at most {max_length} characters")
    if errors:
        raise ValidationError(errors)


def _get_user(user_id: int, sess: Session) -> User:
    user = sess.get(User, user_id)
    if user is None:
        raise UserNotFound(user_id)
    return user


def create_user(username: str, email: str, session: Optional[Session] = None) -> UserDto:
    """
    Register a user.

    Args:
        username: Login name
        email: Contact email
        session: Optional database session

    Returns:
        Created UserDto

    Raises:
        ValidationError: If a field is blank or too long
        ResourceAlreadyExists: If the username or email is taken
    """
    _validate_user_fields(username, email)
    username = username.strip()
    email = email.strip()

    def _impl(sess: Session) -> UserDto:
        uniqueness.ensure_unique(uniqueness.USER_USERNAME, username, sess)
        uniqueness.ensure_unique(uniqueness.USER_EMAIL, email, sess)

        user = User(username=username, email=email)
        sess.add(user)
        sess.flush()

        log_operation(logger, operation="create_user", outcome="success", user_id=user.id)
        return user_to_dto(user)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_user(user_id: int, session: Optional[Session] = None) -> UserDto:
    """
    Get a user by ID.

    Raises:
        UserNotFound: If user doesn't exist
    """

    def _impl(sess: Session) -> UserDto:
        return user_to_dto(_get_user(user_id, sess))

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_user(
    user_id: int,
    username: str,
    email: str,
    session: Optional[Session] = None,
) -> UserDto:
    """
    Change a user's username and email.

    Raises:
        UserNotFound: If user doesn't exist
        ValidationError: If a field is blank or too long
        ResourceAlreadyExists: If another user holds the username or email
    """
    _validate_user_fields(username, email)
    username = username.strip()
    email = email.strip()

    def _impl(sess: Session) -> UserDto:
        user = _get_user(user_id, sess)
        uniqueness.ensure_unique(uniqueness.USER_USERNAME, username, sess, exclude_id=user.id)
        uniqueness.ensure_unique(uniqueness.USER_EMAIL, email, sess, exclude_id=user.id)

        user.username = username
        user.email = email
        sess.flush()

        log_operation(logger, operation="update_user", outcome="success", user_id=user.id)
        return user_to_dto(user)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def delete_user(user_id: int, session: Optional[Session] = None) -> None:
    """
    Delete a user with their favorites and recipes.

    Favorites other users placed on the deleted recipes go with them.

    Raises:
        UserNotFound: If user doesn't exist
    """

    def _impl(sess: Session) -> None:
        user = _get_user(user_id, sess)

        favorites = (
            sess.query(Favorite)
            .filter(Favorite.user_id == user.id)
            .delete(synchronize_session="fetch")
        )

        recipes = sess.query(Recipe).filter(Recipe.owner_id == user.id).all()
        for recipe in recipes:
            delete_recipe_rows(recipe, sess)

        sess.delete(user)
        sess.flush()

        log_operation(
            logger,
            operation="delete_user",
            outcome="success",
            user_id=user_id,
            favorites=favorites,
            recipes=len(recipes),
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
