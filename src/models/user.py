"""
User model for recipe owners.

Authentication data (passwords, roles, tokens) lives with the external
auth layer; this table only records the identity that owns recipes and
favorites.
"""

from sqlalchemy import Column, String

from .base import BaseModel
from src.utils.constants import MAX_EMAIL_LENGTH, MAX_USERNAME_LENGTH


class User(BaseModel):
    """
    User model.

    Attributes:
        username: Login name (unique, exact match)
        email: Contact email (unique, exact match)
    """

    __tablename__ = "users"

    username = Column(String(MAX_USERNAME_LENGTH), nullable=False, unique=True, index=True)
    email = Column(String(MAX_EMAIL_LENGTH), nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        """String representation of user."""
        return f"User(id={self.id}, username='{self.username}')"
