"""
Favorite model linking users to the recipes they marked as favorite.
"""

from sqlalchemy import Column, ForeignKey, Index, Integer, UniqueConstraint

from .base import BaseModel


class Favorite(BaseModel):
    """
    Favorite junction row.

    At most one row exists per (user, recipe) pair.

    Attributes:
        user_id: Foreign key to User
        recipe_id: Foreign key to Recipe
    """

    __tablename__ = "favorites"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_favorite_user_recipe"),
        Index("idx_favorite_user", "user_id"),
        Index("idx_favorite_recipe", "recipe_id"),
    )

    def __repr__(self) -> str:
        """String representation of favorite."""
        return f"Favorite(user_id={self.user_id}, recipe_id={self.recipe_id})"
