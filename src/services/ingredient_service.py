"""
Ingredient Service - catalog operations for ingredients.

Ingredients are shared catalog entries. Names are stored upper-cased and are
unique case-insensitively. An ingredient is never deleted; it is disabled
instead, and only while no recipe uses it. Disabled ingredients are hidden
from search and cannot be edited.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

import logging
from typing import List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.enums import UnitMeasure
from src.models.ingredient import Ingredient
from src.models.recipe import RecipeIngredient
from src.services import uniqueness
from src.services.database import session_scope
from src.services.dto import IngredientDto, ingredient_to_dto
from src.services.exceptions import IngredientInUse, IngredientNotFound, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import MAX_INGREDIENT_NAME_LENGTH, MIN_INGREDIENT_NAME_LENGTH
from src.utils.validators import (
    normalize_name,
    validate_required_string,
    validate_string_length_range,
)

logger = get_service_logger(__name__)


def _validate_name(name: Optional[str]) -> str:
    is_valid, error = validate_required_string(name, "Ingredient name")
    if is_valid:
        is_valid, error = validate_string_length_range(
            name, MIN_INGREDIENT_NAME_LENGTH, MAX_INGREDIENT_NAME_LENGTH, "Ingredient name"
        )
    if not is_valid:
        raise ValidationError([error])
    return normalize_name(name)


def _coerce_unit(unit_measure: Union[UnitMeasure, str, None]) -> UnitMeasure:
    if isinstance(unit_measure, UnitMeasure):
        return unit_measure
    try:
        return UnitMeasure(str(unit_measure).strip().upper())
    except ValueError:
        raise ValidationError([f"Unit measure: Unknown unit '{unit_measure}'"])


def _get_ingredient(ingredient_id: int, sess: Session, active_only: bool = False) -> Ingredient:
    query = sess.query(Ingredient).filter(Ingredient.id == ingredient_id)
    if active_only:
        query = query.filter(Ingredient.active.is_(True))
    ingredient = query.first()
    if ingredient is None:
        raise IngredientNotFound(ingredient_id)
    return ingredient


def list_ingredients(
    include_inactive: bool = False,
    session: Optional[Session] = None,
) -> List[IngredientDto]:
    """
    List ingredients ordered by name.

    Args:
        include_inactive: Include disabled ingredients
        session: Optional database session

    Returns:
        List of IngredientDto
    """

    def _impl(sess: Session) -> List[IngredientDto]:
        query = sess.query(Ingredient)
        if not include_inactive:
            query = query.filter(Ingredient.active.is_(True))
        return [ingredient_to_dto(i) for i in query.order_by(Ingredient.name).all()]

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def search_ingredients(term: str, session: Optional[Session] = None) -> List[IngredientDto]:
    """
    Search active ingredients by case-insensitive substring of the name.

    Args:
        term: Text to look for; a blank term matches every active ingredient
        session: Optional database session

    Returns:
        Matching IngredientDto list ordered by name
    """
    # Match % and _ in the term literally
    escaped = (
        (term or "").strip().upper().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    pattern = f"%{escaped}%"

    def _impl(sess: Session) -> List[IngredientDto]:
        results = (
            sess.query(Ingredient)
            .filter(Ingredient.active.is_(True))
            .filter(func.upper(Ingredient.name).like(pattern, escape="\\"))
            .order_by(Ingredient.name)
            .all()
        )
        return [ingredient_to_dto(i) for i in results]

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_ingredient(ingredient_id: int, session: Optional[Session] = None) -> IngredientDto:
    """
    Get an ingredient by ID, active or not.

    Raises:
        IngredientNotFound: If ingredient doesn't exist
    """

    def _impl(sess: Session) -> IngredientDto:
        return ingredient_to_dto(_get_ingredient(ingredient_id, sess))

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def create_ingredient(
    name: str,
    unit_measure: Union[UnitMeasure, str],
    image_url: Optional[str] = None,
    session: Optional[Session] = None,
) -> IngredientDto:
    """
    Add an ingredient to the catalog.

    Args:
        name: Ingredient name (stored upper-cased)
        unit_measure: UnitMeasure member or its name
        image_url: Optional image URL
        session: Optional database session

    Returns:
        Created IngredientDto

    Raises:
        ValidationError: If name or unit is invalid
        ResourceAlreadyExists: If the name exists in any letter case
    """
    normalized = _validate_name(name)
    unit = _coerce_unit(unit_measure)

    def _impl(sess: Session) -> IngredientDto:
        uniqueness.ensure_unique(uniqueness.INGREDIENT_NAME, normalized, sess)

        ingredient = Ingredient(
            name=normalized,
            unit_measure=unit,
            active=True,
            image_url=image_url,
        )
        sess.add(ingredient)
        sess.flush()

        log_operation(
            logger,
            operation="create_ingredient",
            outcome="success",
            ingredient_id=ingredient.id,
            ingredient_name=normalized,
        )
        return ingredient_to_dto(ingredient)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_ingredient(
    ingredient_id: int,
    name: str,
    unit_measure: Union[UnitMeasure, str],
    session: Optional[Session] = None,
) -> IngredientDto:
    """
    Rename an active ingredient and change its unit.

    Raises:
        IngredientNotFound: If ingredient doesn't exist or is disabled
        ValidationError: If name or unit is invalid
        ResourceAlreadyExists: If another ingredient already has the name
    """
    normalized = _validate_name(name)
    unit = _coerce_unit(unit_measure)

    def _impl(sess: Session) -> IngredientDto:
        ingredient = _get_ingredient(ingredient_id, sess, active_only=True)
        uniqueness.ensure_unique(
            uniqueness.INGREDIENT_NAME, normalized, sess, exclude_id=ingredient.id
        )

        ingredient.name = normalized
        ingredient.unit_measure = unit
        sess.flush()

        log_operation(
            logger,
            operation="update_ingredient",
            outcome="success",
            ingredient_id=ingredient.id,
        )
        return ingredient_to_dto(ingredient)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_ingredient_image(
    ingredient_id: int,
    image_url: Optional[str],
    session: Optional[Session] = None,
) -> Optional[str]:
    """
    Replace an ingredient's image URL.

    Returns:
        The previous URL, so the upload service can discard the old file

    Raises:
        IngredientNotFound: If ingredient doesn't exist
    """

    def _impl(sess: Session) -> Optional[str]:
        ingredient = _get_ingredient(ingredient_id, sess)
        previous = ingredient.image_url
        ingredient.image_url = image_url
        sess.flush()

        log_operation(
            logger,
            operation="update_ingredient_image",
            outcome="success",
            ingredient_id=ingredient.id,
        )
        return previous

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def disable_ingredient(ingredient_id: int, session: Optional[Session] = None) -> IngredientDto:
    """
    Hide an ingredient from the catalog.

    Raises:
        IngredientNotFound: If ingredient doesn't exist
        IngredientInUse: If any recipe still uses the ingredient
    """

    def _impl(sess: Session) -> IngredientDto:
        ingredient = _get_ingredient(ingredient_id, sess)

        recipe_count = (
            sess.query(func.count(RecipeIngredient.id))
            .filter(RecipeIngredient.ingredient_id == ingredient.id)
            .scalar()
        )
        if recipe_count:
            log_operation(
                logger,
                operation="disable_ingredient",
                outcome="in_use",
                level=logging.WARNING,
                ingredient_id=ingredient.id,
                recipe_count=recipe_count,
            )
            raise IngredientInUse(ingredient.id, recipe_count)

        ingredient.active = False
        sess.flush()

        log_operation(
            logger,
            operation="disable_ingredient",
            outcome="success",
            ingredient_id=ingredient.id,
        )
        return ingredient_to_dto(ingredient)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def enable_ingredient(ingredient_id: int, session: Optional[Session] = None) -> IngredientDto:
    """
    Make a disabled ingredient available again.

    Raises:
        IngredientNotFound: If ingredient doesn't exist
    """

    def _impl(sess: Session) -> IngredientDto:
        ingredient = _get_ingredient(ingredient_id, sess)
        ingredient.active = True
        sess.flush()

        log_operation(
            logger,
            operation="enable_ingredient",
            outcome="success",
            ingredient_id=ingredient.id,
        )
        return ingredient_to_dto(ingredient)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
