"""
Enumerations for the recipe catalog models.

This module contains enums used across catalog models:
- RecipeStatus: Moderation state of a recipe
- UnitMeasure: Unit in which an ingredient is measured
"""

from enum import Enum


class RecipeStatus(str, Enum):
    """
    Recipe moderation status.

    Every create or update puts a recipe back into PENDING; approval and
    rejection are decided outside this backend.

    Values:
        PENDING: Awaiting moderation
        APPROVED: Visible in the public catalog
        REJECTED: Refused by a moderator
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class UnitMeasure(str, Enum):
    """Unit of measure for an ingredient's recipe quantities."""

    GRAMS = "GRAMS"
    MILLILITERS = "MILLILITERS"
    CUPS = "CUPS"
    UNITS = "UNITS"
    LITERS = "LITERS"
    TABLESPOONS = "TABLESPOONS"
    TEASPOONS = "TEASPOONS"
