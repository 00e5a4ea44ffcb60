"""
Ingredient model for the shared ingredient catalog.

Ingredients are catalog entries referenced by recipes through
RecipeIngredient rows. They are never deleted by recipe operations; an
ingredient that is no longer offered is deactivated instead.
"""

from sqlalchemy import Boolean, Column, Enum, String

from .base import BaseModel
from .enums import UnitMeasure
from src.utils.constants import MAX_IMAGE_URL_LENGTH, MAX_INGREDIENT_NAME_LENGTH


class Ingredient(BaseModel):
    """
    Ingredient model.

    Attributes:
        name: Ingredient name, stored upper-cased; unique case-insensitively
        unit_measure: Unit used for quantities of this ingredient
        active: Whether the ingredient is offered in searches
        image_url: Opaque URL managed by the external upload service
    """

    __tablename__ = "ingredients"

    name = Column(String(MAX_INGREDIENT_NAME_LENGTH), nullable=False, unique=True, index=True)
    unit_measure = Column(Enum(UnitMeasure), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    image_url = Column(String(MAX_IMAGE_URL_LENGTH), nullable=True)

    def __repr__(self) -> str:
        """String representation of ingredient."""
        return f"Ingredient(id={self.id}, name='{self.name}', unit_measure={self.unit_measure})"
