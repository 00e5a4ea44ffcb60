"""Tests for category_service CRUD operations and category resolution."""

import pytest

from src.services import category_service, recipe_service
from src.services.exceptions import (
    CategoryNotFound,
    ResourceAlreadyExists,
    ValidationError,
)


# ============================================================================
# resolve_categories tests
# ============================================================================


class TestResolveCategories:
    """Tests for category_service.resolve_categories()."""

    def test_empty_input_resolves_to_empty_list(self, test_db):
        assert category_service.resolve_categories([], test_db()) == []

    def test_matches_case_insensitively(self, test_db, sample_categories):
        """Lower- and mixed-case names find the stored upper-case rows."""
        found = category_service.resolve_categories({"dessert", "Breakfast"}, test_db())
        assert [category.name for category in found] == ["BREAKFAST", "DESSERT"]

    def test_reports_every_missing_name(self, test_db, sample_categories):
        """All unknown names are listed, sorted, not just the first."""
        with pytest.raises(CategoryNotFound) as exc_info:
            category_service.resolve_categories(
                {"DESSERT", "NONEXISTENT", "BRUNCH"}, test_db()
            )

        assert exc_info.value.names == ["BRUNCH", "NONEXISTENT"]
        assert str(exc_info.value) == "Categories not found: BRUNCH, NONEXISTENT"
        assert exc_info.value.error_code == "RESOURCE_NOT_FOUND"

    def test_never_creates_categories(self, test_db, sample_categories):
        with pytest.raises(CategoryNotFound):
            category_service.resolve_categories({"BRUNCH"}, test_db())
        assert len(category_service.list_categories()) == 3


# ============================================================================
# CRUD tests
# ============================================================================


class TestCreateCategory:
    """Tests for category_service.create_category()."""

    def test_create_normalizes_name(self, test_db):
        """Names are stored stripped and upper-cased."""
        dto = category_service.create_category("  Gluten Free  ")
        assert dto.name == "GLUTEN FREE"
        assert dto.id is not None

    def test_duplicate_in_other_case_conflicts(self, test_db):
        category_service.create_category("Dessert")
        with pytest.raises(ResourceAlreadyExists, match="Category name"):
            category_service.create_category("dessert")

    def test_blank_name_rejected(self, test_db):
        with pytest.raises(ValidationError):
            category_service.create_category("   ")

    def test_too_long_name_rejected(self, test_db):
        with pytest.raises(ValidationError, match="at most 50"):
            category_service.create_category("X" * 51)


class TestUpdateCategory:
    """Tests for category_service.update_category()."""

    def test_rename(self, sample_categories):
        dessert = sample_categories["DESSERT"]
        dto = category_service.update_category(dessert.id, "Sweets")
        assert dto.name == "SWEETS"
        assert category_service.get_category(dessert.id).name == "SWEETS"

    def test_rename_to_own_name_in_other_case(self, sample_categories):
        """Uniqueness ignores the category being renamed."""
        dessert = sample_categories["DESSERT"]
        assert category_service.update_category(dessert.id, "dessert").name == "DESSERT"

    def test_rename_onto_other_category_conflicts(self, sample_categories):
        with pytest.raises(ResourceAlreadyExists):
            category_service.update_category(sample_categories["DESSERT"].id, "breakfast")

    def test_missing_category(self, test_db):
        with pytest.raises(CategoryNotFound, match="ID 99"):
            category_service.update_category(99, "Anything")


class TestDeleteCategory:
    """Tests for category_service.delete_category()."""

    def test_delete_detaches_from_recipes(self, sample_recipe, sample_categories):
        """Recipes survive and simply lose the category."""
        category_service.delete_category(sample_categories["BREAKFAST"].id)

        assert recipe_service.get_recipe(sample_recipe.id).categories == set()
        assert [c.name for c in category_service.list_categories()] == ["DESSERT", "VEGETARIAN"]

    def test_delete_missing(self, test_db):
        with pytest.raises(CategoryNotFound):
            category_service.delete_category(99)

    def test_get_missing(self, test_db):
        with pytest.raises(CategoryNotFound):
            category_service.get_category(99)
