"""
Database models package.

This package contains all SQLAlchemy ORM models for the recipe catalog.
"""

from .base import Base, BaseModel
from .enums import RecipeStatus, UnitMeasure
from .user import User
from .category import Category
from .ingredient import Ingredient
from .recipe import Recipe, RecipeIngredient, recipe_categories
from .favorite import Favorite

__all__ = [
    "Base",
    "BaseModel",
    "RecipeStatus",
    "UnitMeasure",
    "User",
    "Category",
    "Ingredient",
    "Recipe",
    "RecipeIngredient",
    "recipe_categories",
    "Favorite",
]
