"""Data Transfer Objects for the service layer.

Requests enter the service layer as plain dataclasses and results leave it
as DTOs built while the session is still open, so callers never touch
detached ORM instances.

Contents:
- Requests: RecipeRequest, RecipeIngredientRequest
- Responses: RecipeDto, RecipeIngredientDto, CategoryDto, IngredientDto,
  UserDto, FavoriteDto, ErrorResponse
- Pagination: PaginationParams, PaginatedResult
- Mappers: *_to_dto functions from ORM models
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, List, Optional, Set, TypeVar

T = TypeVar("T")


# ============================================================================
# Requests
# ============================================================================


@dataclass(frozen=True)
class RecipeIngredientRequest:
    """One requested (ingredient, quantity) pair."""

    ingredient_id: int
    quantity: float


@dataclass
class RecipeRequest:
    """Create/update payload for a recipe aggregate.

    Attributes:
        title: Recipe title (unique, exact match)
        description: Short description
        preparation: Preparation instructions
        ingredients: Requested (ingredient_id, quantity) pairs; must not repeat an id
        categories: Names of existing categories; empty clears all categories
    """

    title: str
    description: str
    preparation: str
    ingredients: List[RecipeIngredientRequest] = field(default_factory=list)
    categories: Set[str] = field(default_factory=set)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecipeRequest":
        """Build a request from the wire shape (``ingredientId`` keys)."""
        return cls(
            title=data.get("title"),
            description=data.get("description"),
            preparation=data.get("preparation"),
            ingredients=[
                RecipeIngredientRequest(
                    ingredient_id=item.get("ingredientId"),
                    quantity=item.get("quantity"),
                )
                for item in data.get("ingredients") or []
            ],
            categories=set(data.get("categories") or []),
        )

    def requested_quantities(self) -> Dict[int, float]:
        """Map of ingredient_id -> quantity (assumes ids are unique)."""
        return {item.ingredient_id: float(item.quantity) for item in self.ingredients}


# ============================================================================
# Responses
# ============================================================================


@dataclass
class RecipeIngredientDto:
    ingredient_id: int
    name: str
    quantity: float
    unit: Optional[str]
    image_url: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ingredientId": self.ingredient_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "imageUrl": self.image_url,
        }


@dataclass
class RecipeDto:
    """Assembled view of a recipe aggregate."""

    id: int
    title: str
    description: str
    preparation: str
    categories: Set[str]
    status: str
    ingredients: List[RecipeIngredientDto]
    image_url: Optional[str]
    user_id: int
    popularity: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation with camelCase keys."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "preparation": self.preparation,
            "categories": sorted(self.categories),
            "status": self.status,
            "ingredients": [item.to_dict() for item in self.ingredients],
            "imageUrl": self.image_url,
            "userId": self.user_id,
        }


@dataclass
class CategoryDto:
    id: int
    name: str


@dataclass
class IngredientDto:
    id: int
    name: str
    unit_measure: str
    active: bool
    image_url: Optional[str]


@dataclass
class UserDto:
    id: int
    username: str
    email: str


@dataclass
class FavoriteDto:
    id: int
    user_id: int
    username: str
    recipe: RecipeDto


@dataclass
class ErrorResponse:
    """Structured error payload returned at the API boundary."""

    error_code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"errorCode": self.error_code, "message": self.message}


# ============================================================================
# Pagination
# ============================================================================


@dataclass
class PaginationParams:
    """Pagination parameters for list operations.

    Attributes:
        page: Page number (1-indexed, default 1)
        per_page: Items per page (default 50, max 1000)

    Raises:
        ValueError: If page < 1, per_page < 1, or per_page > 1000
    """

    page: int = 1
    per_page: int = 50

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.per_page < 1:
            raise ValueError("per_page must be >= 1")
        if self.per_page > 1000:
            raise ValueError("per_page must be <= 1000")

    def offset(self) -> int:
        """SQL OFFSET value: (page - 1) * per_page."""
        return (self.page - 1) * self.per_page


@dataclass
class PaginatedResult(Generic[T]):
    """Generic paginated result container.

    Examples:
        >>> PaginatedResult(items=[], total=101, page=1, per_page=50).pages
        3
        >>> PaginatedResult(items=[], total=0, page=1, per_page=50).pages
        1
    """

    items: List[T]
    total: int
    page: int
    per_page: int

    @property
    def pages(self) -> int:
        if self.total == 0:
            return 1
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


# ============================================================================
# Mappers
# ============================================================================


def _enum_value(value) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", value)


def recipe_to_dto(recipe) -> RecipeDto:
    """
    Assemble a RecipeDto from a Recipe and its loaded relationships.

    Must be called while the recipe's session is open.
    """
    return RecipeDto(
        id=recipe.id,
        title=recipe.title,
        description=recipe.description,
        preparation=recipe.preparation,
        categories={category.name for category in recipe.categories},
        status=_enum_value(recipe.status),
        ingredients=[
            RecipeIngredientDto(
                ingredient_id=ri.ingredient_id,
                name=ri.ingredient.name,
                quantity=ri.quantity,
                unit=_enum_value(ri.ingredient.unit_measure),
                image_url=ri.ingredient.image_url,
            )
            for ri in recipe.recipe_ingredients
        ],
        image_url=recipe.image_url,
        user_id=recipe.owner_id,
        popularity=recipe.popularity,
    )


def recipes_to_dtos(recipes: Iterable) -> List[RecipeDto]:
    return [recipe_to_dto(recipe) for recipe in recipes]


def category_to_dto(category) -> CategoryDto:
    return CategoryDto(id=category.id, name=category.name)


def ingredient_to_dto(ingredient) -> IngredientDto:
    return IngredientDto(
        id=ingredient.id,
        name=ingredient.name,
        unit_measure=_enum_value(ingredient.unit_measure),
        active=ingredient.active,
        image_url=ingredient.image_url,
    )


def user_to_dto(user) -> UserDto:
    return UserDto(id=user.id, username=user.username, email=user.email)


def favorite_to_dto(favorite, user, recipe) -> FavoriteDto:
    return FavoriteDto(
        id=favorite.id,
        user_id=favorite.user_id,
        username=user.username,
        recipe=recipe_to_dto(recipe),
    )
