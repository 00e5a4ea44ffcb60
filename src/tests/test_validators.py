"""Tests for input validation functions."""

import pytest

from src.services.dto import RecipeIngredientRequest, RecipeRequest
from src.utils.validators import (
    normalize_name,
    validate_positive_number,
    validate_recipe_request,
    validate_required_string,
    validate_string_length_range,
)


def _request(**overrides):
    fields = {
        "title": "Tomato Soup",
        "description": "A warming tomato soup",
        "preparation": "Simmer and blend.",
        "ingredients": [RecipeIngredientRequest(1, 2.0)],
        "categories": {"SOUP"},
    }
    fields.update(overrides)
    return RecipeRequest(**fields)


class TestStringValidators:
    def test_required_string(self):
        assert validate_required_string("x")[0]
        assert not validate_required_string(None)[0]
        assert not validate_required_string("  ", "Title")[0]
        assert validate_required_string("", "Title")[1].startswith("Title:")

    @pytest.mark.parametrize(
        "value,valid",
        [("abcd", False), ("abcde", True), ("a" * 100, True), ("a" * 101, False), ("  abcde  ", True)],
    )
    def test_length_range(self, value, valid):
        assert validate_string_length_range(value, 5, 100)[0] is valid


class TestPositiveNumber:
    @pytest.mark.parametrize("value", [1, 0.5, "2.5"])
    def test_valid(self, value):
        assert validate_positive_number(value)[0]

    @pytest.mark.parametrize("value", [0, -1, "abc", None, True])
    def test_invalid(self, value):
        assert not validate_positive_number(value)[0]

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "nan", "inf"])
    def test_non_finite(self, value):
        is_valid, error = validate_positive_number(value, "Quantity")
        assert not is_valid
        assert error == "Quantity: Please enter a valid number"


class TestValidateRecipeRequest:
    def test_valid_request(self):
        assert validate_recipe_request(_request()) == (True, [])

    def test_collects_every_error(self):
        is_valid, errors = validate_recipe_request(
            _request(title="", description="short", preparation=None, ingredients=[])
        )

        assert not is_valid
        assert [error.split(":")[0] for error in errors] == [
            "Title",
            "Description",
            "Preparation",
            "Ingredients",
        ]

    def test_missing_ingredient_id(self):
        is_valid, errors = validate_recipe_request(
            _request(ingredients=[RecipeIngredientRequest(None, 1.0)])
        )
        assert not is_valid
        assert errors[0].startswith("Ingredient ID")

    def test_blank_category_name(self):
        is_valid, errors = validate_recipe_request(_request(categories={" "}))
        assert not is_valid
        assert errors == ["Category: This field is required"]

    def test_duplicates_are_not_checked_here(self):
        """Duplicate ingredient ids are reported by the recipe service instead."""
        request = _request(
            ingredients=[RecipeIngredientRequest(1, 1.0), RecipeIngredientRequest(1, 2.0)]
        )
        assert validate_recipe_request(request)[0]


def test_normalize_name():
    assert normalize_name("  gluten free ") == "GLUTEN FREE"
