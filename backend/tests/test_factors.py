import pytest

from inputs_api.core.errors import ConflictError, ValidationError
from inputs_api.db.models import Category, CategoryFactor
from inputs_api.services.categories import CategoryRepository
from inputs_api.services.factors import add_factor


def _rows(db, category, factor):
    return (
        db.query(CategoryFactor)
        .filter(CategoryFactor.category_name == category, CategoryFactor.factor == factor)
        .count()
    )


def test_add_factor_then_duplicate_conflicts(db):
    row = add_factor(db, "treatment", "X")
    assert row.factor == "X"
    assert _rows(db, "treatment", "X") == 1

    with pytest.raises(ConflictError):
        add_factor(db, "treatment", "X")

    assert _rows(db, "treatment", "X") == 1


def test_add_factor_is_case_sensitive(db):
    add_factor(db, "treatment", "X")
    add_factor(db, "treatment", "x")

    assert _rows(db, "treatment", "X") == 1
    assert _rows(db, "treatment", "x") == 1


def test_add_factor_registers_new_category(db):
    assert db.get(Category, "new category") is None

    add_factor(db, "new category", "first")

    assert db.get(Category, "new category") is not None


def test_same_factor_in_other_category_is_allowed(db):
    add_factor(db, "treatment", "X")
    add_factor(db, "mediators", "X")

    assert _rows(db, "mediators", "X") == 1


@pytest.mark.parametrize("name, factor", [(None, "X"), ("treatment", None), ("", "X"), ("treatment", "  ")])
def test_add_factor_requires_both_fields(db, name, factor):
    with pytest.raises(ValidationError) as exc:
        add_factor(db, name, factor)

    assert exc.value.code == "MISSING_FIELD"
    assert db.query(CategoryFactor).count() == 0


def test_concurrent_adds_can_duplicate(db, monkeypatch):
    # Two requests that both run their lookup before either inserts. Nothing in the
    # database stops the second insert, so the duplicate check is best-effort only.
    monkeypatch.setattr(CategoryRepository, "find_factor", lambda self, name, factor: None)

    add_factor(db, "treatment", "X")
    add_factor(db, "treatment", "X")

    assert _rows(db, "treatment", "X") == 2
