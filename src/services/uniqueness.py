"""
Unique key checks for catalog entities.

Each unique business key is described by a UniqueKeyPolicy that names the
model column and its collation. Recipe titles, usernames and emails compare
exactly; category and ingredient names compare case-insensitively.

Checks run inside the caller's session so the read and the subsequent write
share one transaction. Database unique constraints remain the final guard
against concurrent inserts.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.category import Category
from src.models.ingredient import Ingredient
from src.models.recipe import Recipe
from src.models.user import User
from src.services.exceptions import ResourceAlreadyExists
from src.services.logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


class Collation(str, Enum):
    """How two key values are compared."""

    EXACT = "exact"
    CASE_INSENSITIVE = "case_insensitive"


@dataclass(frozen=True)
class UniqueKeyPolicy:
    """
    Uniqueness rule for one column.

    Attributes:
        model: ORM model class owning the column
        column: Column attribute name
        collation: Comparison rule for values
        label: Human-readable key name used in conflict messages
    """

    model: Any
    column: str
    collation: Collation
    label: str

    def matches(self, value: str):
        """SQL expression matching rows whose key equals value under this collation."""
        column = getattr(self.model, self.column)
        if self.collation is Collation.CASE_INSENSITIVE:
            return func.upper(column) == value.strip().upper()
        return column == value


RECIPE_TITLE = UniqueKeyPolicy(Recipe, "title", Collation.EXACT, "Recipe title")
CATEGORY_NAME = UniqueKeyPolicy(Category, "name", Collation.CASE_INSENSITIVE, "Category name")
INGREDIENT_NAME = UniqueKeyPolicy(Ingredient, "name", Collation.CASE_INSENSITIVE, "Ingredient name")
USER_USERNAME = UniqueKeyPolicy(User, "username", Collation.EXACT, "Username")
USER_EMAIL = UniqueKeyPolicy(User, "email", Collation.EXACT, "Email")


def exists(
    policy: UniqueKeyPolicy,
    value: str,
    session: Session,
    exclude_id: Optional[int] = None,
) -> bool:
    """
    Check whether another row already holds this key.

    Args:
        policy: Unique key policy to apply
        value: Candidate key value
        session: Database session
        exclude_id: Row ID to ignore (the entity being updated)

    Returns:
        True if a conflicting row exists
    """
    query = session.query(policy.model.id).filter(policy.matches(value))
    if exclude_id is not None:
        query = query.filter(policy.model.id != exclude_id)
    return session.query(query.exists()).scalar()


def ensure_unique(
    policy: UniqueKeyPolicy,
    value: str,
    session: Session,
    exclude_id: Optional[int] = None,
) -> None:
    """
    Raise if the key is already taken.

    Raises:
        ResourceAlreadyExists: If another row holds the key
    """
    if exists(policy, value, session, exclude_id=exclude_id):
        log_operation(
            logger,
            operation="ensure_unique",
            outcome="conflict",
            level=logging.WARNING,
            key=policy.label,
            value=value,
            exclude_id=exclude_id,
        )
        raise ResourceAlreadyExists(policy.label, value)
