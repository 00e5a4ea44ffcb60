"""
Recipe Service - Business logic for the recipe aggregate.

A recipe, its category set and its ingredient rows are one consistency unit.
Every mutating operation here:
- validates the whole request and checks every invariant before mutating
  (title uniqueness, ownership, duplicate ingredients, category and
  ingredient existence)
- runs in a single transaction, so a failure persists nothing
- puts the recipe back into PENDING moderation on create and update

Queries return DTOs assembled inside the session.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

import logging
from typing import Callable, List, Optional, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.enums import RecipeStatus
from src.models.favorite import Favorite
from src.models.recipe import Recipe
from src.models.user import User
from src.services import ingredient_reconciler, uniqueness
from src.services.category_service import resolve_categories
from src.services.database import session_scope
from src.services.dto import (
    PaginatedResult,
    PaginationParams,
    RecipeDto,
    RecipeRequest,
    recipe_to_dto,
    recipes_to_dtos,
)
from src.services.exceptions import (
    DatabaseError,
    RecipeNotFound,
    ResourceAlreadyExists,
    ResourceNotFound,
    UserNotFound,
    ValidationError,
)
from src.services.logging_utils import get_service_logger, log_operation
from src.services.ownership import assert_owner
from src.utils.validators import validate_recipe_request

logger = get_service_logger(__name__)

T = TypeVar("T")


def _run(impl: Callable[[Session], T], session: Optional[Session], failure: str) -> T:
    if session is not None:
        return impl(session)

    try:
        with session_scope() as sess:
            return impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError(failure, e)


# ============================================================================
# Lookups and checks
# ============================================================================


def _get_recipe(recipe_id: int, sess: Session) -> Recipe:
    recipe = sess.query(Recipe).filter(Recipe.id == recipe_id).first()
    if recipe is None:
        raise RecipeNotFound(recipe_id)
    return recipe


def _validate(request: RecipeRequest, operation: str) -> None:
    is_valid, errors = validate_recipe_request(request)
    if not is_valid:
        log_operation(
            logger,
            operation=operation,
            outcome="validation_failed",
            level=logging.WARNING,
            errors=errors,
        )
        raise ValidationError(errors)


def _ensure_title_available(
    title: str, sess: Session, operation: str, exclude_id: Optional[int] = None
) -> None:
    try:
        uniqueness.ensure_unique(uniqueness.RECIPE_TITLE, title, sess, exclude_id=exclude_id)
    except ResourceAlreadyExists:
        log_operation(
            logger,
            operation=operation,
            outcome="duplicate_title",
            level=logging.WARNING,
            title=title,
        )
        raise


def _ensure_distinct_ingredients(request: RecipeRequest, operation: str) -> None:
    ids = [item.ingredient_id for item in request.ingredients]
    duplicates = ingredient_reconciler.find_duplicate_ingredient_ids(ids)
    if duplicates:
        log_operation(
            logger,
            operation=operation,
            outcome="duplicate_ingredient",
            level=logging.WARNING,
            ingredient_ids=duplicates,
        )
    ingredient_reconciler.ensure_no_duplicates(ids)


def _check_owner(recipe: Recipe, requester_id: int) -> None:
    assert_owner(recipe.owner_id, requester_id, resource="recipe")


def delete_recipe_rows(recipe: Recipe, sess: Session) -> dict:
    """
    Delete a recipe together with every row that depends on it.

    Join rows are removed explicitly before the recipe itself: ingredient
    rows, category associations and favorites referencing the recipe.
    Catalog categories and ingredients are never touched.

    Args:
        recipe: Recipe to delete (attached to sess)
        sess: Database session

    Returns:
        Dictionary with the number of rows removed per kind
    """
    counts = {
        "ingredient_rows": len(recipe.recipe_ingredients),
        "category_links": len(recipe.categories),
    }

    recipe.recipe_ingredients.clear()
    recipe.categories.clear()
    counts["favorites"] = (
        sess.query(Favorite)
        .filter(Favorite.recipe_id == recipe.id)
        .delete(synchronize_session="fetch")
    )
    sess.flush()

    sess.delete(recipe)
    sess.flush()
    return counts


# ============================================================================
# CRUD Operations
# ============================================================================


def create_recipe(
    request: RecipeRequest,
    owner_id: int,
    session: Optional[Session] = None,
) -> RecipeDto:
    """
    Create a recipe with its ingredients and categories.

    Args:
        request: Recipe fields, ingredient quantities and category names
        owner_id: ID of the user creating the recipe
        session: Optional database session

    Returns:
        RecipeDto of the new recipe (status PENDING, popularity 0)

    Raises:
        ValidationError: If a field is blank, out of bounds, or no ingredient is given
        UserNotFound: If the owner doesn't exist
        ResourceAlreadyExists: If another recipe has exactly this title
        DuplicateIngredient: If an ingredient ID is listed twice
        CategoryNotFound: If any category name doesn't exist
        IngredientNotFound: If any ingredient ID doesn't exist
        DatabaseError: If database operation fails
    """
    _validate(request, "create_recipe")

    def _impl(sess: Session) -> RecipeDto:
        if sess.get(User, owner_id) is None:
            raise UserNotFound(owner_id)

        title = request.title.strip()
        _ensure_title_available(title, sess, "create_recipe")
        _ensure_distinct_ingredients(request, "create_recipe")
        categories = resolve_categories(request.categories or (), sess)

        requested = request.requested_quantities()
        ingredients = ingredient_reconciler.load_ingredients(requested.keys(), sess)

        recipe = Recipe(
            title=title,
            description=request.description.strip(),
            preparation=request.preparation.strip(),
            owner_id=owner_id,
            status=RecipeStatus.PENDING,
            popularity=0,
        )
        recipe.categories = categories
        sess.add(recipe)
        ingredient_reconciler.reconcile_recipe_ingredients(
            recipe, requested, sess, ingredients=ingredients
        )

        log_operation(
            logger,
            operation="create_recipe",
            outcome="success",
            recipe_id=recipe.id,
            owner_id=owner_id,
            ingredients=len(requested),
            categories=len(categories),
        )
        return recipe_to_dto(recipe)

    return _run(_impl, session, "Failed to create recipe")


def update_recipe(
    recipe_id: int,
    request: RecipeRequest,
    requester_id: int,
    session: Optional[Session] = None,
) -> RecipeDto:
    """
    Replace a recipe's fields, categories and ingredient set.

    Ingredient rows are reconciled rather than recreated: rows for
    ingredients that stay keep their identity and only change quantity.
    The recipe goes back to PENDING whatever its previous status.

    Args:
        recipe_id: Recipe ID
        request: Complete desired state of the recipe
        requester_id: ID of the user making the change (must be the owner)
        session: Optional database session

    Returns:
        Updated RecipeDto

    Raises:
        ValidationError: If a field is blank, out of bounds, or no ingredient is given
        RecipeNotFound: If recipe doesn't exist
        AccessDenied: If requester is not the owner
        ResourceAlreadyExists: If another recipe has exactly this title
        DuplicateIngredient: If an ingredient ID is listed twice
        CategoryNotFound: If any category name doesn't exist
        IngredientNotFound: If any added ingredient ID doesn't exist
        DatabaseError: If database operation fails
    """
    _validate(request, "update_recipe")

    def _impl(sess: Session) -> RecipeDto:
        recipe = _get_recipe(recipe_id, sess)
        _check_owner(recipe, requester_id)

        title = request.title.strip()
        _ensure_title_available(title, sess, "update_recipe", exclude_id=recipe.id)
        _ensure_distinct_ingredients(request, "update_recipe")
        categories = resolve_categories(request.categories or (), sess)

        requested = request.requested_quantities()
        diff = ingredient_reconciler.diff_ingredients(recipe.ingredient_quantities(), requested)
        ingredients = ingredient_reconciler.load_ingredients(diff.to_add.keys(), sess)

        # Every check has passed; mutate from here on
        recipe.title = title
        recipe.description = request.description.strip()
        recipe.preparation = request.preparation.strip()
        recipe.categories = categories
        ingredient_reconciler.reconcile_recipe_ingredients(
            recipe, requested, sess, ingredients=ingredients
        )
        recipe.status = RecipeStatus.PENDING
        sess.flush()

        log_operation(
            logger,
            operation="update_recipe",
            outcome="success",
            recipe_id=recipe.id,
            requester_id=requester_id,
            removed=len(diff.to_remove),
            updated=len(diff.to_update),
            added=len(diff.to_add),
        )
        return recipe_to_dto(recipe)

    return _run(_impl, session, f"Failed to update recipe {recipe_id}")


def delete_recipe(
    recipe_id: int,
    requester_id: int,
    session: Optional[Session] = None,
) -> None:
    """
    Delete a recipe, its ingredient rows, its category links and its favorites.

    Args:
        recipe_id: Recipe ID
        requester_id: ID of the user making the change (must be the owner)
        session: Optional database session

    Raises:
        RecipeNotFound: If recipe doesn't exist
        AccessDenied: If requester is not the owner
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> None:
        recipe = _get_recipe(recipe_id, sess)
        _check_owner(recipe, requester_id)

        counts = delete_recipe_rows(recipe, sess)

        log_operation(
            logger,
            operation="delete_recipe",
            outcome="success",
            recipe_id=recipe_id,
            requester_id=requester_id,
            **counts,
        )

    return _run(_impl, session, f"Failed to delete recipe {recipe_id}")


def update_recipe_image(
    recipe_id: int,
    image_url: Optional[str],
    requester_id: int,
    session: Optional[Session] = None,
) -> Optional[str]:
    """
    Replace a recipe's image URL.

    The moderation status is left as is.

    Returns:
        The previous URL, so the upload service can discard the old file

    Raises:
        RecipeNotFound: If recipe doesn't exist
        AccessDenied: If requester is not the owner
    """

    def _impl(sess: Session) -> Optional[str]:
        recipe = _get_recipe(recipe_id, sess)
        _check_owner(recipe, requester_id)

        previous = recipe.image_url
        recipe.image_url = image_url
        sess.flush()

        log_operation(
            logger,
            operation="update_recipe_image",
            outcome="success",
            recipe_id=recipe.id,
        )
        return previous

    return _run(_impl, session, f"Failed to update image of recipe {recipe_id}")


# ============================================================================
# Queries
# ============================================================================


def get_recipe(recipe_id: int, session: Optional[Session] = None) -> RecipeDto:
    """
    Retrieve a recipe by ID.

    Raises:
        RecipeNotFound: If recipe doesn't exist
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> RecipeDto:
        return recipe_to_dto(_get_recipe(recipe_id, sess))

    return _run(_impl, session, f"Failed to retrieve recipe {recipe_id}")


def get_recipe_by_title(title: str, session: Optional[Session] = None) -> RecipeDto:
    """
    Retrieve a recipe by its exact title.

    Raises:
        RecipeNotFound: If no recipe has this title
    """

    def _impl(sess: Session) -> RecipeDto:
        recipe = sess.query(Recipe).filter(Recipe.title == title).first()
        if recipe is None:
            raise RecipeNotFound(title=title)
        return recipe_to_dto(recipe)

    return _run(_impl, session, "Failed to retrieve recipe by title")


def list_recipes(
    pagination: Optional[PaginationParams] = None,
    session: Optional[Session] = None,
) -> PaginatedResult[RecipeDto]:
    """
    List recipes ordered by ID.

    Args:
        pagination: Page to return; None returns every recipe on one page
        session: Optional database session

    Returns:
        PaginatedResult of RecipeDto
    """

    def _impl(sess: Session) -> PaginatedResult[RecipeDto]:
        total = sess.query(func.count(Recipe.id)).scalar()
        query = sess.query(Recipe).order_by(Recipe.id)

        if pagination is None:
            return PaginatedResult(
                items=recipes_to_dtos(query.all()),
                total=total,
                page=1,
                per_page=max(total, 1),
            )

        recipes = query.offset(pagination.offset()).limit(pagination.per_page).all()
        return PaginatedResult(
            items=recipes_to_dtos(recipes),
            total=total,
            page=pagination.page,
            per_page=pagination.per_page,
        )

    return _run(_impl, session, "Failed to list recipes")


def get_recipes_by_user(user_id: int, session: Optional[Session] = None) -> List[RecipeDto]:
    """
    List every recipe owned by a user, ordered by ID.

    Raises:
        UserNotFound: If user doesn't exist
        ResourceNotFound: If the user owns no recipes
    """

    def _impl(sess: Session) -> List[RecipeDto]:
        if sess.get(User, user_id) is None:
            raise UserNotFound(user_id)

        recipes = (
            sess.query(Recipe).filter(Recipe.owner_id == user_id).order_by(Recipe.id).all()
        )
        if not recipes:
            raise ResourceNotFound(f"User {user_id} has no recipes")
        return recipes_to_dtos(recipes)

    return _run(_impl, session, f"Failed to list recipes of user {user_id}")
