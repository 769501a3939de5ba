# Builds the {name, label, factors, dependsOn} listings served to the client and therapist forms
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypedDict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inputs_api.core import config
from inputs_api.core.errors import StoreError
from inputs_api.db.models import Category, CategoryFactor, InputNode, Relationship
from inputs_api.services.formatting import first_letter_label, to_title_case

logger = logging.getLogger(__name__)


class CategoryDescriptor(TypedDict):
    name: str
    label: str
    factors: List[str]
    dependsOn: Optional[List[str]]


class CategoryRepository:
    """
    Stateless access to categories and their factor rows.
    Every call takes the category name(s) explicitly; nothing is cached between requests.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_names(self) -> List[str]:
        rows = self.db.query(Category.name).order_by(Category.created_at.asc(), Category.name.asc()).all()
        return [name for (name,) in rows]

    def exists(self, name: str) -> bool:
        return self.db.get(Category, name) is not None

    def register(self, name: str) -> Category:
        category = self.db.get(Category, name)
        if category is None:
            category = Category(name=name)
            self.db.add(category)
            self.db.flush()
        return category

    def factors_by_category(self, names: Sequence[str]) -> Dict[str, List[str]]:
        """
        One query for every requested category; falsy factor values are dropped.
        Names with no rows come back as an empty list.
        """
        result: Dict[str, List[str]] = {name: [] for name in names}
        if not names:
            return result

        rows = (
            self.db.query(CategoryFactor.category_name, CategoryFactor.factor)
            .filter(CategoryFactor.category_name.in_(list(names)))
            .order_by(CategoryFactor.id.asc())
            .all()
        )
        for category_name, factor in rows:
            if factor:
                result[category_name].append(factor)
        return result

    def find_factor(self, name: str, factor: str) -> Optional[CategoryFactor]:
        # exact, case-sensitive match
        return (
            self.db.query(CategoryFactor)
            .filter(CategoryFactor.category_name == name, CategoryFactor.factor == factor)
            .first()
        )

    def add_factor(self, name: str, factor: str) -> CategoryFactor:
        self.register(name)
        row = CategoryFactor(category_name=name, factor=factor)
        self.db.add(row)
        self.db.flush()
        return row


# ---------- helpers ----------

def parse_depends_on(raw: Optional[str]) -> List[str]:
    # "A, B" -> ["A", "B"]; None / "" -> []
    if not raw:
        return []
    return [dep.strip() for dep in raw.split(",") if dep.strip()]


def build_dependency_map(relationships: Iterable[Relationship]) -> Dict[str, List[str]]:
    # a later row for the same name replaces an earlier one
    dependency_map: Dict[str, List[str]] = {}
    for rel in relationships:
        dependency_map[rel.name] = parse_depends_on(rel.depends_on)
    return dependency_map


def is_reserved(name: str, prefixes: Sequence[str]) -> bool:
    return any(name.startswith(prefix) for prefix in prefixes)


def _load_dependency_map(db: Session) -> Dict[str, List[str]]:
    return build_dependency_map(db.query(Relationship).order_by(Relationship.id.asc()).all())


def _describe(
        names: Sequence[str],
        factors: Dict[str, List[str]],
        dependency_map: Dict[str, List[str]],
        label_for: Callable[[str], str],
        title_case_factors: bool,
) -> List[CategoryDescriptor]:
    descriptors: List[CategoryDescriptor] = []
    for name in names:
        values = factors.get(name, [])
        dependencies = dependency_map.get(name, [])
        descriptors.append({
            "name": name,
            "label": label_for(name),
            "factors": [to_title_case(v) for v in values] if title_case_factors else list(values),
            "dependsOn": dependencies if dependencies else None,
        })
    return descriptors


# ---------- operations ----------

def list_all_categories(
        db: Session,
        reserved_prefixes: Optional[Sequence[str]] = None,
        title_case_factors: Optional[bool] = None,
) -> List[CategoryDescriptor]:
    """
    Therapist view: every registered category except the reserved ones.
    Defaults come from RESERVED_PREFIX_POLICY and TITLE_CASE_THERAPIST_FACTORS.
    """
    if reserved_prefixes is None:
        reserved_prefixes = config.RESERVED_PREFIXES[config.RESERVED_PREFIX_POLICY]
    if title_case_factors is None:
        title_case_factors = config.TITLE_CASE_THERAPIST_FACTORS

    repo = CategoryRepository(db)
    try:
        names = [name for name in repo.list_names() if not is_reserved(name, reserved_prefixes)]
        dependency_map = _load_dependency_map(db)
        factors = repo.factors_by_category(names)
    except SQLAlchemyError as exc:
        logger.exception("Error loading therapist inputs")
        raise StoreError("Failed to load therapist inputs") from exc

    return _describe(names, factors, dependency_map, first_letter_label, title_case_factors)


def list_client_categories(db: Session) -> List[CategoryDescriptor]:
    """Client view: the fixed allow-list, always four entries, always title-cased."""
    names = list(config.CLIENT_CATEGORIES)

    repo = CategoryRepository(db)
    try:
        dependency_map = _load_dependency_map(db)
        factors = repo.factors_by_category(names)
    except SQLAlchemyError as exc:
        logger.exception("Error loading client inputs")
        raise StoreError("Failed to load client inputs") from exc

    return _describe(names, factors, dependency_map, to_title_case, True)


def list_seeded_inputs(db: Session) -> List[dict]:
    try:
        nodes = db.query(InputNode).order_by(InputNode.order.asc(), InputNode.id.asc()).all()
    except SQLAlchemyError as exc:
        logger.exception("Error loading seeded inputs")
        raise StoreError("Failed to load inputs") from exc
    return [node.to_dict() for node in nodes]
