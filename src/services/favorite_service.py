"""
Favorite Service - favorites and recipe popularity.

Marking a recipe as favorite inserts one Favorite row and bumps the recipe's
popularity counter with a single UPDATE expression, so concurrent favorites
never lose an increment. Popularity counts lifetime favorite events: removing
a favorite deletes the row but leaves the counter unchanged.

Users cannot favorite their own recipes, and a (user, recipe) pair can be
favorited at most once.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.favorite import Favorite
from src.models.recipe import Recipe
from src.models.user import User
from src.services.database import session_scope
from src.services.dto import FavoriteDto, favorite_to_dto
from src.services.exceptions import (
    DatabaseError,
    FavoriteAlreadyExists,
    FavoriteNotFound,
    RecipeNotFound,
    SelfFavoriteNotAllowed,
    UserNotFound,
)
from src.services.logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def _get_recipe(recipe_id: int, sess: Session) -> Recipe:
    recipe = sess.get(Recipe, recipe_id)
    if recipe is None:
        raise RecipeNotFound(recipe_id)
    return recipe


def _get_user(user_id: int, sess: Session) -> User:
    user = sess.get(User, user_id)
    if user is None:
        raise UserNotFound(user_id)
    return user


def _find_favorite(user_id: int, recipe_id: int, sess: Session) -> Optional[Favorite]:
    return (
        sess.query(Favorite)
        .filter(Favorite.user_id == user_id, Favorite.recipe_id == recipe_id)
        .first()
    )


def increment_popularity(recipe_id: int, sess: Session) -> None:
    """Add one to a recipe's popularity in the database, not in Python."""
    sess.query(Recipe).filter(Recipe.id == recipe_id).update(
        {Recipe.popularity: Recipe.popularity + 1},
        synchronize_session=False,
    )


def add_favorite(
    user_id: int,
    recipe_id: int,
    session: Optional[Session] = None,
) -> FavoriteDto:
    """
    Mark a recipe as favorite for a user.

    Args:
        user_id: ID of the user
        recipe_id: ID of the recipe
        session: Optional database session

    Returns:
        FavoriteDto with the recipe's updated popularity

    Raises:
        RecipeNotFound: If recipe doesn't exist
        UserNotFound: If user doesn't exist
        FavoriteAlreadyExists: If the pair is already a favorite
        SelfFavoriteNotAllowed: If the user owns the recipe
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> FavoriteDto:
        recipe = _get_recipe(recipe_id, sess)
        user = _get_user(user_id, sess)

        if _find_favorite(user_id, recipe_id, sess) is not None:
            log_operation(
                logger,
                operation="add_favorite",
                outcome="already_favorite",
                level=logging.WARNING,
                user_id=user_id,
                recipe_id=recipe_id,
            )
            raise FavoriteAlreadyExists(user_id, recipe_id)

        if recipe.owner_id == user_id:
            log_operation(
                logger,
                operation="add_favorite",
                outcome="self_favorite",
                level=logging.WARNING,
                user_id=user_id,
                recipe_id=recipe_id,
            )
            raise SelfFavoriteNotAllowed(user_id, recipe_id)

        favorite = Favorite(user_id=user_id, recipe_id=recipe_id)
        try:
            # Savepoint keeps the caller's transaction usable if the insert loses a race
            with sess.begin_nested():
                sess.add(favorite)
        except IntegrityError:
            log_operation(
                logger,
                operation="add_favorite",
                outcome="already_favorite",
                level=logging.WARNING,
                user_id=user_id,
                recipe_id=recipe_id,
            )
            raise FavoriteAlreadyExists(user_id, recipe_id)

        increment_popularity(recipe_id, sess)
        sess.refresh(recipe)

        log_operation(
            logger,
            operation="add_favorite",
            outcome="success",
            user_id=user_id,
            recipe_id=recipe_id,
            popularity=recipe.popularity,
        )
        return favorite_to_dto(favorite, user, recipe)

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to add favorite", e)


def remove_favorite(
    user_id: int,
    recipe_id: int,
    session: Optional[Session] = None,
) -> None:
    """
    Remove a recipe from a user's favorites.

    Popularity is not decremented.

    Raises:
        RecipeNotFound: If recipe doesn't exist
        FavoriteNotFound: If the pair is not a favorite
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> None:
        _get_recipe(recipe_id, sess)

        favorite = _find_favorite(user_id, recipe_id, sess)
        if favorite is None:
            log_operation(
                logger,
                operation="remove_favorite",
                outcome="not_favorite",
                level=logging.WARNING,
                user_id=user_id,
                recipe_id=recipe_id,
            )
            raise FavoriteNotFound(user_id, recipe_id)

        sess.delete(favorite)
        sess.flush()

        log_operation(
            logger,
            operation="remove_favorite",
            outcome="success",
            user_id=user_id,
            recipe_id=recipe_id,
        )

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to remove favorite", e)


def is_favorite(user_id: int, recipe_id: int, session: Optional[Session] = None) -> bool:
    """
    Check whether a user has marked a recipe as favorite.

    Raises:
        RecipeNotFound: If recipe doesn't exist
    """

    def _impl(sess: Session) -> bool:
        _get_recipe(recipe_id, sess)
        return _find_favorite(user_id, recipe_id, sess) is not None

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_user_favorites(user_id: int, session: Optional[Session] = None) -> List[FavoriteDto]:
    """
    List a user's favorites, oldest first.

    Raises:
        UserNotFound: If user doesn't exist
    """

    def _impl(sess: Session) -> List[FavoriteDto]:
        user = _get_user(user_id, sess)
        rows = (
            sess.query(Favorite, Recipe)
            .join(Recipe, Recipe.id == Favorite.recipe_id)
            .filter(Favorite.user_id == user_id)
            .order_by(Favorite.id)
            .all()
        )
        return [favorite_to_dto(favorite, user, recipe) for favorite, recipe in rows]

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
