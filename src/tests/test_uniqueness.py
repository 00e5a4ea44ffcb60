"""Tests for the per-entity unique key policies."""

import pytest

from src.models import Category, Recipe
from src.services import uniqueness
from src.services.exceptions import ResourceAlreadyExists
from src.services.uniqueness import Collation


class TestPolicies:
    """The named policies carry the collation each key is compared with."""

    @pytest.mark.parametrize(
        "policy,collation",
        [
            (uniqueness.RECIPE_TITLE, Collation.EXACT),
            (uniqueness.CATEGORY_NAME, Collation.CASE_INSENSITIVE),
            (uniqueness.INGREDIENT_NAME, Collation.CASE_INSENSITIVE),
            (uniqueness.USER_USERNAME, Collation.EXACT),
            (uniqueness.USER_EMAIL, Collation.EXACT),
        ],
    )
    def test_collations(self, policy, collation):
        assert policy.collation is collation


class TestExists:
    """Tests for uniqueness.exists()."""

    def test_exact_policy_is_case_sensitive(self, test_db, sample_recipe):
        session = test_db()
        assert uniqueness.exists(uniqueness.RECIPE_TITLE, "Pancakes", session)
        assert not uniqueness.exists(uniqueness.RECIPE_TITLE, "pancakes", session)

    def test_case_insensitive_policy(self, test_db, sample_categories):
        session = test_db()
        assert uniqueness.exists(uniqueness.CATEGORY_NAME, "dessert", session)
        assert uniqueness.exists(uniqueness.CATEGORY_NAME, " Dessert ", session)
        assert not uniqueness.exists(uniqueness.CATEGORY_NAME, "desserts", session)

    def test_exclude_id_ignores_own_row(self, test_db, sample_recipe):
        session = test_db()
        own_id = session.query(Recipe.id).scalar()
        assert not uniqueness.exists(
            uniqueness.RECIPE_TITLE, "Pancakes", session, exclude_id=own_id
        )

    def test_exclude_id_still_sees_other_rows(self, test_db, sample_categories):
        session = test_db()
        breakfast_id = session.query(Category.id).filter(Category.name == "BREAKFAST").scalar()
        assert uniqueness.exists(
            uniqueness.CATEGORY_NAME, "dessert", session, exclude_id=breakfast_id
        )


class TestEnsureUnique:
    """Tests for uniqueness.ensure_unique()."""

    def test_raises_conflict_with_label(self, test_db, sample_user):
        with pytest.raises(ResourceAlreadyExists) as exc_info:
            uniqueness.ensure_unique(uniqueness.USER_USERNAME, "alice", test_db())

        assert str(exc_info.value) == "Username 'alice' already exists"
        assert exc_info.value.label == "Username"
        assert exc_info.value.value == "alice"

    def test_passes_for_free_key(self, test_db, sample_user):
        uniqueness.ensure_unique(uniqueness.USER_EMAIL, "new@example.com", test_db())
