"""
Category Service - CRUD operations and name resolution for categories.

Categories are flat labels stored upper-cased. Names are unique
case-insensitively. Recipes reference categories by name; resolution is
all-or-nothing: if any requested name is unknown, the whole request is
rejected and every missing name is reported.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.category import Category
from src.models.recipe import recipe_categories
from src.services import uniqueness
from src.services.database import session_scope
from src.services.dto import CategoryDto, category_to_dto
from src.services.exceptions import CategoryNotFound, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import MAX_CATEGORY_NAME_LENGTH
from src.utils.validators import normalize_name, validate_required_string

logger = get_service_logger(__name__)


# ============================================================================
# Utility Functions
# ============================================================================


def _validate_name(name: Optional[str]) -> str:
    is_valid, error = validate_required_string(name, "Category name")
    if not is_valid:
        raise ValidationError([error])
    normalized = normalize_name(name)
    if len(normalized) > MAX_CATEGORY_NAME_LENGTH:
        raise ValidationError(
            [f"Category name: Must be at most {MAX_CATEGORY_NAME_LENGTH} characters"]
        )
    return normalized


def _get_category(category_id: int, sess: Session) -> Category:
    category = sess.query(Category).filter(Category.id == category_id).first()
    if category is None:
        raise CategoryNotFound(category_id=category_id)
    return category


def resolve_categories(names: Iterable[str], session: Session) -> List[Category]:
    """
    Resolve category names to existing Category rows.

    Matching is case-insensitive and names are never created implicitly.

    Args:
        names: Requested category names (an empty collection resolves to [])
        session: Database session

    Returns:
        List of Category objects ordered by name

    Raises:
        CategoryNotFound: Listing every requested name with no match
    """
    requested = {name.strip() for name in names}
    if not requested:
        return []

    found = (
        session.query(Category)
        .filter(func.upper(Category.name).in_({name.upper() for name in requested}))
        .order_by(Category.name)
        .all()
    )
    found_keys = {category.name.casefold() for category in found}
    missing = [name for name in requested if name.casefold() not in found_keys]
    if missing:
        log_operation(
            logger,
            operation="resolve_categories",
            outcome="not_found",
            level=logging.WARNING,
            missing=sorted(missing),
        )
        raise CategoryNotFound(missing)
    return found


# ============================================================================
# CRUD Operations
# ============================================================================


def list_categories(session: Optional[Session] = None) -> List[CategoryDto]:
    """
    List all categories ordered by name.

    Args:
        session: Optional database session

    Returns:
        List of CategoryDto
    """

    def _impl(sess: Session) -> List[CategoryDto]:
        return [
            category_to_dto(category)
            for category in sess.query(Category).order_by(Category.name).all()
        ]

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_category(category_id: int, session: Optional[Session] = None) -> CategoryDto:
    """
    Get a category by ID.

    Raises:
        CategoryNotFound: If category doesn't exist
    """

    def _impl(sess: Session) -> CategoryDto:
        return category_to_dto(_get_category(category_id, sess))

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def create_category(name: str, session: Optional[Session] = None) -> CategoryDto:
    """
    Create a new category.

    Args:
        name: Category name (stored upper-cased)
        session: Optional database session

    Returns:
        Created CategoryDto

    Raises:
        ValidationError: If name is empty or too long
        ResourceAlreadyExists: If the name exists in any letter case
    """
    normalized = _validate_name(name)

    def _impl(sess: Session) -> CategoryDto:
        uniqueness.ensure_unique(uniqueness.CATEGORY_NAME, normalized, sess)

        category = Category(name=normalized)
        sess.add(category)
        sess.flush()

        log_operation(
            logger,
            operation="create_category",
            outcome="success",
            category_id=category.id,
            category_name=normalized,
        )
        return category_to_dto(category)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_category(
    category_id: int,
    name: str,
    session: Optional[Session] = None,
) -> CategoryDto:
    """
    Rename a category.

    Raises:
        CategoryNotFound: If category doesn't exist
        ValidationError: If name is empty or too long
        ResourceAlreadyExists: If another category already has the name
    """
    normalized = _validate_name(name)

    def _impl(sess: Session) -> CategoryDto:
        category = _get_category(category_id, sess)
        uniqueness.ensure_unique(
            uniqueness.CATEGORY_NAME, normalized, sess, exclude_id=category.id
        )

        category.name = normalized
        sess.flush()

        log_operation(
            logger,
            operation="update_category",
            outcome="success",
            category_id=category.id,
            category_name=normalized,
        )
        return category_to_dto(category)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def delete_category(category_id: int, session: Optional[Session] = None) -> None:
    """
    Delete a category and detach it from every recipe using it.

    Recipes themselves are untouched.

    Raises:
        CategoryNotFound: If category doesn't exist
    """

    def _impl(sess: Session) -> None:
        category = _get_category(category_id, sess)

        detached = sess.execute(
            recipe_categories.delete().where(recipe_categories.c.category_id == category.id)
        ).rowcount
        sess.delete(category)
        sess.flush()

        log_operation(
            logger,
            operation="delete_category",
            outcome="success",
            category_id=category_id,
            recipes_detached=detached,
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
