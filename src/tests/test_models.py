"""
Tests for database models.

Tests cover:
- Model creation and persistence
- Database constraints (uniqueness, positive quantity, foreign keys)
- Relationships from Recipe to its categories and ingredient rows
"""

import pytest
from sqlalchemy.exc import IntegrityError

from src.models import (
    Category,
    Favorite,
    Ingredient,
    Recipe,
    RecipeIngredient,
    RecipeStatus,
    UnitMeasure,
    User,
)


@pytest.fixture
def db_session(test_db):
    """Session bound to the in-memory test database."""
    session = test_db()
    yield session
    session.rollback()


@pytest.fixture
def owner(db_session):
    user = User(username="owner", email="owner@example.com")
    db_session.add(user)
    db_session.flush()
    return user


@pytest.fixture
def flour(db_session):
    ingredient = Ingredient(name="FLOUR", unit_measure=UnitMeasure.GRAMS)
    db_session.add(ingredient)
    db_session.flush()
    return ingredient


def _recipe(owner, title="Banana Bread"):
    return Recipe(
        title=title,
        description="Moist banana loaf",
        preparation="Mash, mix, bake.",
        owner_id=owner.id,
    )


class TestRecipeModel:
    """Tests for Recipe model."""

    def test_defaults(self, db_session, owner):
        recipe = _recipe(owner)
        db_session.add(recipe)
        db_session.flush()

        assert recipe.status == RecipeStatus.PENDING
        assert recipe.popularity == 0
        assert recipe.uuid is not None
        assert recipe.created_at is not None

    def test_title_unique(self, db_session, owner):
        db_session.add(_recipe(owner))
        db_session.flush()
        db_session.add(_recipe(owner))

        with pytest.raises(IntegrityError):
            db_session.flush()

    def test_ingredient_quantities(self, db_session, owner, flour):
        recipe = _recipe(owner)
        recipe.recipe_ingredients.append(RecipeIngredient(ingredient=flour, quantity=250.0))
        db_session.add(recipe)
        db_session.flush()

        assert recipe.ingredient_quantities() == {flour.id: 250.0}
        assert recipe.recipe_ingredients[0].ingredient.name == "FLOUR"

    def test_categories_relationship(self, db_session, owner):
        bread = Category(name="BREAD")
        recipe = _recipe(owner)
        recipe.categories.append(bread)
        db_session.add(recipe)
        db_session.flush()

        assert [c.name for c in recipe.categories] == ["BREAD"]

    def test_to_dict_renders_enums_and_dates(self, db_session, owner):
        recipe = _recipe(owner)
        db_session.add(recipe)
        db_session.flush()

        data = recipe.to_dict()
        assert data["status"] == "PENDING"
        assert isinstance(data["created_at"], str)
        assert data["owner_id"] == owner.id


class TestRecipeIngredientConstraints:
    """Database constraints on recipe ingredient rows."""

    def test_quantity_must_be_positive(self, db_session, owner, flour):
        recipe = _recipe(owner)
        recipe.recipe_ingredients.append(RecipeIngredient(ingredient=flour, quantity=0))
        db_session.add(recipe)

        with pytest.raises(IntegrityError):
            db_session.flush()

    def test_one_row_per_ingredient(self, db_session, owner, flour):
        recipe = _recipe(owner)
        recipe.recipe_ingredients.append(RecipeIngredient(ingredient=flour, quantity=1.0))
        recipe.recipe_ingredients.append(RecipeIngredient(ingredient=flour, quantity=2.0))
        db_session.add(recipe)

        with pytest.raises(IntegrityError):
            db_session.flush()

    def test_foreign_keys_enforced(self, db_session, owner):
        recipe = _recipe(owner)
        recipe.recipe_ingredients.append(RecipeIngredient(ingredient_id=9999, quantity=1.0))
        db_session.add(recipe)

        with pytest.raises(IntegrityError):
            db_session.flush()


class TestFavoriteModel:
    def test_pair_unique(self, db_session, owner):
        fan = User(username="fan", email="fan@example.com")
        recipe = _recipe(owner)
        db_session.add_all([fan, recipe])
        db_session.flush()

        db_session.add(Favorite(user_id=fan.id, recipe_id=recipe.id))
        db_session.flush()
        db_session.add(Favorite(user_id=fan.id, recipe_id=recipe.id))

        with pytest.raises(IntegrityError):
            db_session.flush()
