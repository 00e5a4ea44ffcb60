"""Service layer exception classes for the Recipe Catalog.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application, plus the mapping from an
exception to the structured error payload returned to API clients.

Exception Hierarchy:
    ServiceError (base)
    ├── ResourceNotFound                (RESOURCE_NOT_FOUND, 404)
    │   ├── RecipeNotFound
    │   ├── IngredientNotFound
    │   ├── CategoryNotFound
    │   ├── FavoriteNotFound
    │   └── UserNotFound
    ├── ResourceAlreadyExists           (CONFLICT, 409)
    │   └── FavoriteAlreadyExists
    ├── InvalidRequest                  (INVALID_REQUEST, 400)
    │   ├── ValidationError
    │   ├── DuplicateIngredient
    │   ├── SelfFavoriteNotAllowed
    │   └── IngredientInUse
    ├── AccessDenied                    (ACCESS_DENIED, 403)
    └── DatabaseError                   (INTERNAL_ERROR, 500)
"""

import logging
from typing import Iterable, Tuple

from src.services.dto import ErrorResponse
from src.utils.constants import ERROR_UNEXPECTED

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base exception for all service layer errors.

    Subclasses set ``error_code`` and ``http_status`` so the API boundary can
    translate any service failure without inspecting its type.
    """

    error_code = "INTERNAL_ERROR"
    http_status = 500


# ============================================================================
# Not Found (404)
# ============================================================================


class ResourceNotFound(ServiceError):
    """Raised when a referenced record does not exist."""

    error_code = "RESOURCE_NOT_FOUND"
    http_status = 404


class RecipeNotFound(ResourceNotFound):
    """Raised when a recipe cannot be found by ID or title.

    Example:
        >>> raise RecipeNotFound(42)
        RecipeNotFound: Recipe with ID 42 not found
    """

    def __init__(self, recipe_id=None, title: str = None):
        self.recipe_id = recipe_id
        self.title = title
        if title is not None:
            super().__init__(f"Recipe with title '{title}' not found")
        else:
            super().__init__(f"Recipe with ID {recipe_id} not found")


class IngredientNotFound(ResourceNotFound):
    """Raised when an ingredient cannot be found by ID."""

    def __init__(self, ingredient_id: int):
        self.ingredient_id = ingredient_id
        super().__init__(f"Ingredient with ID {ingredient_id} not found")


class CategoryNotFound(ResourceNotFound):
    """Raised when one or more categories do not exist.

    Args:
        names: Every requested category name that was not found
        category_id: Set instead of names when looked up by ID

    Example:
        >>> raise CategoryNotFound(["BRUNCH", "NONEXISTENT"])
        CategoryNotFound: Categories not found: BRUNCH, NONEXISTENT
    """

    def __init__(self, names: Iterable[str] = (), category_id: int = None):
        self.names = sorted(names)
        self.category_id = category_id
        if category_id is not None:
            super().__init__(f"Category with ID {category_id} not found")
        else:
            super().__init__(f"Categories not found: {', '.join(self.names)}")


class FavoriteNotFound(ResourceNotFound):
    """Raised when a user has not marked a recipe as favorite."""

    def __init__(self, user_id: int, recipe_id: int):
        self.user_id = user_id
        self.recipe_id = recipe_id
        super().__init__(f"Recipe {recipe_id} is not in the favorites of user {user_id}")


class UserNotFound(ResourceNotFound):
    """Raised when a user cannot be found by ID."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User with ID {user_id} not found")


# ============================================================================
# Conflict (409)
# ============================================================================


class ResourceAlreadyExists(ServiceError):
    """Raised when a unique key (title, name, username, email) is already taken.

    Example:
        >>> raise ResourceAlreadyExists("Recipe title", "Pancakes")
        ResourceAlreadyExists: Recipe title 'Pancakes' already exists
    """

    error_code = "CONFLICT"
    http_status = 409

    def __init__(self, label: str, value: str, message: str = None):
        self.label = label
        self.value = value
        super().__init__(message or f"{label} '{value}' already exists")


class FavoriteAlreadyExists(ResourceAlreadyExists):
    """Raised when a (user, recipe) favorite pair already exists."""

    def __init__(self, user_id: int, recipe_id: int):
        self.user_id = user_id
        self.recipe_id = recipe_id
        super().__init__(
            "Favorite",
            f"{user_id}:{recipe_id}",
            message=f"Recipe {recipe_id} is already in the favorites of user {user_id}",
        )


# ============================================================================
# Invalid Request (400)
# ============================================================================


class InvalidRequest(ServiceError):
    """Raised when a request is well-formed but violates a business rule."""

    error_code = "INVALID_REQUEST"
    http_status = 400


class ValidationError(InvalidRequest):
    """Raised when field validation fails."""

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class DuplicateIngredient(InvalidRequest):
    """Raised when one request lists the same ingredient ID more than once."""

    def __init__(self, ingredient_id: int):
        self.ingredient_id = ingredient_id
        super().__init__(f"Duplicate ingredient with ID {ingredient_id}")


class SelfFavoriteNotAllowed(InvalidRequest):
    """Raised when a user tries to favorite a recipe they own."""

    def __init__(self, user_id: int, recipe_id: int):
        self.user_id = user_id
        self.recipe_id = recipe_id
        super().__init__("You cannot add your own recipe to favorites")


class IngredientInUse(InvalidRequest):
    """Raised when disabling an ingredient that recipes still reference."""

    def __init__(self, ingredient_id: int, recipe_count: int):
        self.ingredient_id = ingredient_id
        self.recipe_count = recipe_count
        super().__init__(
            f"Cannot disable ingredient {ingredient_id}: used in {recipe_count} recipe(s)"
        )


# ============================================================================
# Access Denied (403)
# ============================================================================


class AccessDenied(ServiceError):
    """Raised when a requester tries to modify a resource they do not own."""

    error_code = "ACCESS_DENIED"
    http_status = 403

    def __init__(self, resource: str = "resource"):
        self.resource = resource
        super().__init__(f"You do not have permission to modify this {resource}")


# ============================================================================
# Database (500)
# ============================================================================


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")


# ============================================================================
# API boundary mapping
# ============================================================================


_EXPOSED_ERRORS: Tuple[type, ...] = (
    ResourceNotFound,
    ResourceAlreadyExists,
    InvalidRequest,
    AccessDenied,
)


def error_response(exc: Exception) -> Tuple[int, ErrorResponse]:
    """
    Translate an exception into an HTTP status and structured error payload.

    Taxonomy errors keep their message. Everything else, DatabaseError
    included, is reported with a generic message so internal details never
    reach the client; the original is logged instead.

    Args:
        exc: Exception raised by a service operation

    Returns:
        Tuple of (http_status, ErrorResponse)
    """
    if isinstance(exc, _EXPOSED_ERRORS):
        return exc.http_status, ErrorResponse(error_code=exc.error_code, message=str(exc))

    logger.error(f"Unexpected error: {exc!r}", exc_info=exc)
    return 500, ErrorResponse(error_code="INTERNAL_ERROR", message=ERROR_UNEXPECTED)
