# Loaders for the data the admin side owns: form nodes, categories with their factors, relationships.
# The API never writes these except for factors added through /add-factor.
#
# Usage: inputs-seed seed.json   (or: python -m inputs_api.db.seed seed.json)
#
# seed.json:
#   {
#     "inputs": [{"name": "treatment", "label": "Treatment", "factors": ["cbt"], "dependsOn": null, "order": 1}],
#     "categories": {"treatment": ["cbt", {"Factor": "dbt", "PointsTo": "mediators"}]},
#     "relationships": [{"Name": "mediators", "DependsOn": "treatment"}]
#   }
import argparse
import json
import logging
import sys
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from inputs_api.db.models import InputNode, Category, CategoryFactor, Relationship
from inputs_api.db.session import SessionLocal, init_db

logger = logging.getLogger(__name__)


def seed_input_nodes(db: Session, nodes: Iterable[Dict[str, Any]]) -> List[InputNode]:
    """
    Insert InputNode rows, skipping any whose name is already present.
    Accepts the API shape ("dependsOn") as well as the column name ("depends_on").
    """
    existing = {name for (name,) in db.query(InputNode.name).all()}
    created = []

    for node in nodes:
        if node["name"] in existing:
            continue
        row = InputNode(
            name=node["name"],
            label=node["label"],
            factors=list(node.get("factors") or []),
            depends_on=node.get("dependsOn", node.get("depends_on")),
            order=node.get("order", 0),
        )
        db.add(row)
        created.append(row)
        existing.add(node["name"])

    db.commit()
    return created


def seed_category(
        db: Session,
        name: str,
        factors: Iterable[Any] = (),
) -> Category:
    """
    Register the category (if new) and append every factor as given, blanks included.
    A factor is either a plain string or a {"Factor": ..., "PointsTo": ...} document.
    """
    category = db.get(Category, name)
    if category is None:
        category = Category(name=name)
        db.add(category)
        db.flush()

    for factor in factors:
        if isinstance(factor, dict):
            db.add(CategoryFactor(category_name=name, factor=factor.get("Factor"), points_to=factor.get("PointsTo")))
        else:
            db.add(CategoryFactor(category_name=name, factor=factor))

    db.commit()
    return category


def seed_relationship(db: Session, name: str, depends_on: Optional[str]) -> Relationship:
    row = Relationship(name=name, depends_on=depends_on)
    db.add(row)
    db.commit()
    return row


def load_seed_data(db: Session, data: Dict[str, Any]) -> Dict[str, int]:
    # Returns how many rows of each kind were written
    counts = {"inputs": 0, "factors": 0, "relationships": 0}

    counts["inputs"] = len(seed_input_nodes(db, data.get("inputs") or []))

    for name, factors in (data.get("categories") or {}).items():
        factors = list(factors or [])
        seed_category(db, name, factors)
        counts["factors"] += len(factors)

    for rel in data.get("relationships") or []:
        seed_relationship(db, rel["Name"], rel.get("DependsOn"))
        counts["relationships"] += 1

    return counts


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load form inputs, categories and relationships")
    parser.add_argument("path", help="JSON seed file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    with open(args.path) as f:
        data = json.load(f)

    init_db()
    db = SessionLocal()
    try:
        counts = load_seed_data(db, data)
    finally:
        db.close()

    logger.info(
        "Seeded %d inputs, %d factors, %d relationships from %s",
        counts["inputs"], counts["factors"], counts["relationships"], args.path,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
