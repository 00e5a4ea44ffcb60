"""
Ingredient reconciliation for recipe updates.

An update carries the complete desired ingredient set. Rather than deleting
and re-inserting every RecipeIngredient row, the current rows are diffed
against the request:

- rows whose ingredient is no longer requested are removed
- rows whose ingredient is still requested keep their identity and get the
  requested quantity
- requested ingredients with no row yet are added

The diff itself is a pure function so it can be tested without a database.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

from sqlalchemy.orm import Session

from src.models.ingredient import Ingredient
from src.models.recipe import Recipe, RecipeIngredient
from src.services.exceptions import DuplicateIngredient, IngredientNotFound
from src.services.logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


@dataclass
class IngredientDiff:
    """
    Result of comparing current ingredient quantities with requested ones.

    Attributes:
        to_remove: Ingredient IDs present now but not requested
        to_update: Ingredient ID -> requested quantity for rows that stay
        to_add: Ingredient ID -> quantity for rows that must be created
    """

    to_remove: Set[int] = field(default_factory=set)
    to_update: Dict[int, float] = field(default_factory=dict)
    to_add: Dict[int, float] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.to_remove or self.to_update or self.to_add)


def diff_ingredients(current: Mapping[int, float], requested: Mapping[int, float]) -> IngredientDiff:
    """
    Compute the changes that turn current ingredient rows into requested ones.

    Rows kept with an unchanged quantity still appear in to_update; the
    quantity write is idempotent.

    Args:
        current: Ingredient ID -> quantity of the existing rows
        requested: Ingredient ID -> quantity from the request

    Returns:
        IngredientDiff

    Example:
        >>> diff_ingredients({10: 2.0}, {10: 5.0, 11: 1.0})
        IngredientDiff(to_remove=set(), to_update={10: 5.0}, to_add={11: 1.0})
    """
    return IngredientDiff(
        to_remove={ingredient_id for ingredient_id in current if ingredient_id not in requested},
        to_update={
            ingredient_id: quantity
            for ingredient_id, quantity in requested.items()
            if ingredient_id in current
        },
        to_add={
            ingredient_id: quantity
            for ingredient_id, quantity in requested.items()
            if ingredient_id not in current
        },
    )


def find_duplicate_ingredient_ids(ingredient_ids: Iterable[int]) -> List[int]:
    """
    Return ingredient IDs that appear more than once, in first-seen order.

    Args:
        ingredient_ids: Requested ingredient IDs

    Returns:
        List of repeated IDs (empty when all are distinct)
    """
    counts = Counter(ingredient_ids)
    return [ingredient_id for ingredient_id, count in counts.items() if count > 1]


def ensure_no_duplicates(ingredient_ids: Iterable[int]) -> None:
    """
    Reject a request that lists the same ingredient twice.

    Raises:
        DuplicateIngredient: For the first repeated ingredient ID
    """
    duplicates = find_duplicate_ingredient_ids(ingredient_ids)
    if duplicates:
        raise DuplicateIngredient(duplicates[0])


def load_ingredients(ingredient_ids: Iterable[int], session: Session) -> Dict[int, Ingredient]:
    """
    Load catalog ingredients by ID.

    Args:
        ingredient_ids: IDs to resolve
        session: Database session

    Returns:
        Dictionary of ID -> Ingredient

    Raises:
        IngredientNotFound: For the lowest ID that does not exist
    """
    wanted = set(ingredient_ids)
    if not wanted:
        return {}

    found = {
        ingredient.id: ingredient
        for ingredient in session.query(Ingredient).filter(Ingredient.id.in_(wanted)).all()
    }
    missing = sorted(wanted - set(found))
    if missing:
        raise IngredientNotFound(missing[0])
    return found


def apply_diff(
    recipe: Recipe,
    diff: IngredientDiff,
    ingredients: Mapping[int, Ingredient],
) -> None:
    """
    Apply a precomputed diff to a recipe's ingredient rows.

    Args:
        recipe: Recipe whose recipe_ingredients collection is mutated
        diff: Changes to apply
        ingredients: Loaded Ingredient rows for every ID in diff.to_add
    """
    for row in list(recipe.recipe_ingredients):
        if row.ingredient_id in diff.to_remove:
            # delete-orphan cascade deletes the row on flush
            recipe.recipe_ingredients.remove(row)
        elif row.ingredient_id in diff.to_update:
            row.quantity = diff.to_update[row.ingredient_id]

    for ingredient_id, quantity in diff.to_add.items():
        recipe.recipe_ingredients.append(
            RecipeIngredient(
                ingredient_id=ingredient_id,
                ingredient=ingredients[ingredient_id],
                quantity=quantity,
            )
        )


def reconcile_recipe_ingredients(
    recipe: Recipe,
    requested: Mapping[int, float],
    session: Session,
    ingredients: Optional[Mapping[int, Ingredient]] = None,
) -> IngredientDiff:
    """
    Bring a recipe's ingredient rows in line with the requested quantities.

    Rows for ingredients that stay keep their primary key. New ingredient IDs
    must exist in the catalog; duplicates must already have been rejected.

    Args:
        recipe: Recipe being updated (attached to session)
        requested: Ingredient ID -> quantity, the complete desired set
        session: Database session
        ingredients: Already-loaded ingredients for the added IDs, if any

    Returns:
        The diff that was applied

    Raises:
        IngredientNotFound: If an added ingredient ID does not exist
    """
    diff = diff_ingredients(recipe.ingredient_quantities(), requested)
    if ingredients is None:
        ingredients = load_ingredients(diff.to_add.keys(), session)

    apply_diff(recipe, diff, ingredients)
    session.flush()

    log_operation(
        logger,
        operation="reconcile_recipe_ingredients",
        outcome="success",
        recipe_id=recipe.id,
        removed=len(diff.to_remove),
        updated=len(diff.to_update),
        added=len(diff.to_add),
    )
    return diff
