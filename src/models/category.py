"""
Category model for recipe grouping.

Categories are flat labels (e.g., "DESSERT", "VEGETARIAN") that recipes
reference through the recipe_categories association table. A category's
lifecycle is independent of any recipe using it.
"""

from sqlalchemy import Column, String

from .base import BaseModel
from src.utils.constants import MAX_CATEGORY_NAME_LENGTH


class Category(BaseModel):
    """
    Category model.

    Attributes:
        name: Category name, stored upper-cased; unique case-insensitively
    """

    __tablename__ = "categories"

    name = Column(String(MAX_CATEGORY_NAME_LENGTH), nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        """String representation of category."""
        return f"<Category(name='{self.name}')>"
