"""Pytest configuration and fixtures for service layer tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

import src.models  # noqa: F401  (registers every table with Base.metadata)
from src.models.base import Base
from src.models.enums import UnitMeasure
from src.services.database import enable_sqlite_transactions
from src.services.dto import RecipeIngredientRequest, RecipeRequest


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database (foreign keys enforced)
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    engine = enable_sqlite_transactions(create_engine("sqlite:///:memory:", echo=False))

    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import src.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    db_module.get_session_factory = original_get_session


@pytest.fixture(scope="function")
def sample_user(test_db):
    """Provide a recipe owner."""
    from src.services import user_service

    return user_service.create_user("alice", "alice@example.com")


@pytest.fixture(scope="function")
def other_user(test_db):
    """Provide a second user who owns nothing."""
    from src.services import user_service

    return user_service.create_user("bob", "bob@example.com")


@pytest.fixture(scope="function")
def sample_categories(test_db):
    """Provide BREAKFAST, DESSERT and VEGETARIAN categories keyed by name."""
    from src.services import category_service

    return {
        dto.name: dto
        for dto in (
            category_service.create_category("Breakfast"),
            category_service.create_category("Dessert"),
            category_service.create_category("Vegetarian"),
        )
    }


@pytest.fixture(scope="function")
def sample_ingredients(test_db):
    """Provide FLOUR, MILK, EGG and SUGAR ingredients keyed by name."""
    from src.services import ingredient_service

    return {
        dto.name: dto
        for dto in (
            ingredient_service.create_ingredient("Flour", UnitMeasure.GRAMS),
            ingredient_service.create_ingredient("Milk", UnitMeasure.MILLILITERS),
            ingredient_service.create_ingredient("Egg", UnitMeasure.UNITS),
            ingredient_service.create_ingredient("Sugar", UnitMeasure.GRAMS),
        )
    }


@pytest.fixture
def make_request(sample_ingredients):
    """Build a valid RecipeRequest; keyword arguments override the defaults.

    ``ingredients`` may be given as a dict of ingredient name -> quantity.
    """

    def _make(**overrides) -> RecipeRequest:
        ingredients = overrides.pop("ingredients", {"FLOUR": 200.0, "MILK": 300.0})
        if isinstance(ingredients, dict):
            ingredients = [
                RecipeIngredientRequest(sample_ingredients[name].id, quantity)
                for name, quantity in ingredients.items()
            ]
        fields = {
            "title": "Pancakes",
            "description": "Fluffy breakfast pancakes",
            "preparation": "Whisk everything and fry in a hot pan.",
            "ingredients": ingredients,
            "categories": set(),
        }
        fields.update(overrides)
        return RecipeRequest(**fields)

    return _make


@pytest.fixture
def sample_recipe(sample_user, sample_categories, make_request):
    """Provide a recipe owned by sample_user in the BREAKFAST category."""
    from src.services import recipe_service

    return recipe_service.create_recipe(
        make_request(categories={"BREAKFAST"}), owner_id=sample_user.id
    )
