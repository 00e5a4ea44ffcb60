"""
Recipe models for the catalog.

This module contains:
- Recipe: Main recipe model (the aggregate root)
- RecipeIngredient: Junction table linking recipes to ingredients with a quantity
- recipe_categories: Association table linking recipes to categories

Relations point from the recipe outward only. Categories, ingredients and
users carry no back-references to recipes; callers resolve them by id.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, BaseModel
from .category import Category
from .enums import RecipeStatus
from src.utils.constants import MAX_IMAGE_URL_LENGTH, TITLE_LENGTH


# No ondelete cascade: recipe deletion removes association rows explicitly
recipe_categories = Table(
    "recipe_categories",
    Base.metadata,
    Column("recipe_id", Integer, ForeignKey("recipes.id"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id"), primary_key=True),
)


class Recipe(BaseModel):
    """
    Recipe model representing a catalog recipe.

    Attributes:
        title: Recipe title (unique, exact match)
        description: Short description
        preparation: Preparation instructions
        image_url: Opaque URL managed by the external upload service
        popularity: Lifetime count of favorite events (never decremented)
        status: Moderation status, reset to PENDING on every edit
        owner_id: User who created the recipe (immutable)
        categories: Assigned categories
        recipe_ingredients: Ingredient/quantity rows
    """

    __tablename__ = "recipes"

    title = Column(String(TITLE_LENGTH[1]), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    preparation = Column(Text, nullable=False)
    image_url = Column(String(MAX_IMAGE_URL_LENGTH), nullable=True)
    popularity = Column(Integer, nullable=False, default=0)
    status = Column(Enum(RecipeStatus), nullable=False, default=RecipeStatus.PENDING)

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    categories = relationship(
        Category,
        secondary=recipe_categories,
        order_by=Category.name,
        lazy="selectin",
    )
    recipe_ingredients = relationship(
        "RecipeIngredient",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.id",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("popularity >= 0", name="ck_recipe_popularity_non_negative"),
    )

    def __repr__(self) -> str:
        """String representation of recipe."""
        return f"Recipe(id={self.id}, title='{self.title}', status={self.status})"

    def ingredient_quantities(self) -> dict:
        """
        Map of ingredient_id -> quantity for the current join rows.

        Returns:
            Dictionary keyed by ingredient id
        """
        return {ri.ingredient_id: ri.quantity for ri in self.recipe_ingredients}


class RecipeIngredient(BaseModel):
    """
    Junction table linking recipes to ingredients with quantities.

    Attributes:
        recipe_id: Foreign key to Recipe
        ingredient_id: Foreign key to Ingredient
        quantity: Amount needed, in the ingredient's unit of measure (> 0)
    """

    __tablename__ = "recipe_ingredients"

    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=False)

    quantity = Column(Float, nullable=False)

    # Read-side reference for mapping name/unit/image into responses
    ingredient = relationship("Ingredient", lazy="joined")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_recipe_ingredient_quantity_positive"),
        UniqueConstraint(
            "recipe_id",
            "ingredient_id",
            name="uq_recipe_ingredient_recipe_ingredient",
        ),
        Index("idx_recipe_ingredient_recipe", "recipe_id"),
        Index("idx_recipe_ingredient_ingredient", "ingredient_id"),
    )

    def __repr__(self) -> str:
        """String representation of recipe ingredient."""
        return (
            f"RecipeIngredient(id={self.id}, recipe_id={self.recipe_id}, "
            f"ingredient_id={self.ingredient_id}, quantity={self.quantity})"
        )
