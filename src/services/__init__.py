"""Services package - Business logic layer for the Recipe Catalog.

This package contains all service modules that provide business logic
and database operations for the application.

Architecture:
- Services: Stateless functions organized by domain (recipe, favorite, catalog, user)
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Validation: Input validation and invariant checks before any mutation

Service Modules:
- recipe_service: Recipe aggregate create/update/delete and queries
- favorite_service: Favorites and recipe popularity
- category_service: Category CRUD and name resolution
- ingredient_service: Ingredient catalog operations
- user_service: User registration, profile updates and deletion

Infrastructure:
- exceptions: Custom exception classes and API error mapping
- database: Session management and database utilities
- dto: Request/response data transfer objects
- uniqueness: Per-entity unique key policies
- ownership: Owner checks for recipe modification
- ingredient_reconciler: Ingredient row diffing for recipe updates
- logging_utils: Structured operation logging
"""

# Service modules
from . import (
    database,
    category_service,
    favorite_service,
    ingredient_service,
    recipe_service,
    user_service,
)

from .exceptions import (
    ServiceError,
    ResourceNotFound,
    RecipeNotFound,
    IngredientNotFound,
    CategoryNotFound,
    FavoriteNotFound,
    UserNotFound,
    ResourceAlreadyExists,
    FavoriteAlreadyExists,
    InvalidRequest,
    ValidationError,
    DuplicateIngredient,
    SelfFavoriteNotAllowed,
    IngredientInUse,
    AccessDenied,
    DatabaseError,
    error_response,
)

__all__ = [
    # Modules
    "database",
    "category_service",
    "favorite_service",
    "ingredient_service",
    "recipe_service",
    "user_service",
    # Exceptions
    "ServiceError",
    "ResourceNotFound",
    "RecipeNotFound",
    "IngredientNotFound",
    "CategoryNotFound",
    "FavoriteNotFound",
    "UserNotFound",
    "ResourceAlreadyExists",
    "FavoriteAlreadyExists",
    "InvalidRequest",
    "ValidationError",
    "DuplicateIngredient",
    "SelfFavoriteNotAllowed",
    "IngredientInUse",
    "AccessDenied",
    "DatabaseError",
    "error_response",
]
