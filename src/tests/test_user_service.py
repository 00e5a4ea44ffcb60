"""Tests for user_service."""

import pytest

from src.models import Favorite, Recipe, RecipeIngredient, User
from src.services import favorite_service, recipe_service, user_service
from src.services.exceptions import ResourceAlreadyExists, UserNotFound, ValidationError


class TestCreateUser:
    """Tests for user_service.create_user()."""

    def test_create(self, test_db):
        dto = user_service.create_user(" dana ", "dana@example.com")
        assert (dto.username, dto.email) == ("dana", "dana@example.com")
        assert user_service.get_user(dto.id) == dto

    def test_duplicate_username(self, sample_user):
        with pytest.raises(ResourceAlreadyExists, match="Username"):
            user_service.create_user("alice", "other@example.com")

    def test_duplicate_email(self, sample_user):
        with pytest.raises(ResourceAlreadyExists, match="Email"):
            user_service.create_user("alice2", "alice@example.com")

    def test_username_compares_exactly(self, sample_user):
        assert user_service.create_user("Alice", "alice.upper@example.com").username == "Alice"

    def test_blank_fields_reported_together(self, test_db):
        with pytest.raises(ValidationError) as exc_info:
            user_service.create_user("", "  ")
        assert len(exc_info.value.errors) == 2

    def test_get_missing(self, test_db):
        with pytest.raises(UserNotFound):
            user_service.get_user(77)


class TestUpdateUser:
    """Tests for user_service.update_user()."""

    def test_update(self, sample_user):
        dto = user_service.update_user(sample_user.id, "alice_b", "alice@example.com")
        assert dto.username == "alice_b"

    def test_update_onto_other_users_email(self, sample_user, other_user):
        with pytest.raises(ResourceAlreadyExists):
            user_service.update_user(sample_user.id, "alice", "bob@example.com")


class TestDeleteUser:
    """Tests for user_service.delete_user()."""

    def test_delete_removes_recipes_and_favorites(
        self, test_db, sample_recipe, sample_user, other_user, make_request
    ):
        """The user's recipes, their rows, and favorites on both sides are removed."""
        bobs = recipe_service.create_recipe(make_request(title="Bob's Waffles"), owner_id=other_user.id)
        favorite_service.add_favorite(other_user.id, sample_recipe.id)
        favorite_service.add_favorite(sample_user.id, bobs.id)

        user_service.delete_user(sample_user.id)

        session = test_db()
        assert session.query(User).count() == 1
        assert [r.id for r in session.query(Recipe).all()] == [bobs.id]
        assert session.query(Favorite).count() == 0
        assert {row.recipe_id for row in session.query(RecipeIngredient).all()} == {bobs.id}

    def test_delete_missing(self, test_db):
        with pytest.raises(UserNotFound):
            user_service.delete_user(5)
