"""
Input validation functions for the Recipe Catalog backend.

This module provides validation for request payloads before they reach
the database:
- String validation (required fields, length ranges)
- Numeric validation (positive quantities)
- Recipe request validation (aggregates the checks above)

Each validator returns a (is_valid, error_message) tuple; request-level
validators return (is_valid, list_of_errors) so callers can report every
problem at once.
"""

import math
from typing import Any, List, Optional, Tuple

from .constants import (
    DESCRIPTION_LENGTH,
    ERROR_INVALID_NUMBER,
    ERROR_INVALID_POSITIVE,
    ERROR_NO_INGREDIENTS,
    ERROR_REQUIRED_FIELD,
    PREPARATION_LENGTH,
    TITLE_LENGTH,
)


def validate_required_string(value: Optional[str], field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a string field is not empty.

    Args:
        value: The string value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    return True, ""


def validate_string_length_range(
    value: str, min_length: int, max_length: int, field_name: str = "Field"
) -> Tuple[bool, str]:
    """
    Validate that a string length falls within [min_length, max_length].

    Args:
        value: The string value to validate
        min_length: Minimum allowed length
        max_length: Maximum allowed length
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    length = len(value.strip())
    if length < min_length or length > max_length:
        return False, f"{field_name}: Must be between {min_length} and {max_length} characters"
    return True, ""


def validate_positive_number(value: Any, field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a value is a finite positive number (> 0).

    NaN and infinity are rejected as invalid numbers.

    Args:
        value: The value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    try:
        num_value = float(value)
        if not math.isfinite(num_value):
            return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
        if num_value <= 0:
            return False, f"{field_name}: {ERROR_INVALID_POSITIVE}"
        return True, ""
    except (ValueError, TypeError):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"


def _validate_text_field(value: Optional[str], bounds: Tuple[int, int], field_name: str) -> str:
    is_valid, error = validate_required_string(value, field_name)
    if not is_valid:
        return error
    is_valid, error = validate_string_length_range(value, bounds[0], bounds[1], field_name)
    if not is_valid:
        return error
    return ""


def validate_recipe_request(request) -> Tuple[bool, List[str]]:
    """
    Validate all fields of a recipe create/update request.

    Duplicate ingredient ids are not checked here; the recipe service
    reports them separately as DuplicateIngredient.

    Args:
        request: RecipeRequest instance

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    for value, bounds, field_name in (
        (request.title, TITLE_LENGTH, "Title"),
        (request.description, DESCRIPTION_LENGTH, "Description"),
        (request.preparation, PREPARATION_LENGTH, "Preparation"),
    ):
        error = _validate_text_field(value, bounds, field_name)
        if error:
            errors.append(error)

    if not request.ingredients:
        errors.append(f"Ingredients: {ERROR_NO_INGREDIENTS}")
    else:
        for item in request.ingredients:
            if item.ingredient_id is None:
                errors.append(f"Ingredient ID: {ERROR_REQUIRED_FIELD}")
                continue
            is_valid, error = validate_positive_number(
                item.quantity, f"Quantity (ingredient {item.ingredient_id})"
            )
            if not is_valid:
                errors.append(error)

    for name in request.categories or ():
        is_valid, error = validate_required_string(name, "Category")
        if not is_valid:
            errors.append(error)
            break

    return len(errors) == 0, errors


def normalize_name(value: str) -> str:
    """
    Normalize a catalog name (category or ingredient) for storage.

    Names are stored stripped and upper-cased so they display consistently;
    uniqueness is still checked case-insensitively.
    """
    return value.strip().upper()
