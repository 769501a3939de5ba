from sqlalchemy.orm import Session # this function writes inside a DB transaction
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from inputs_api.core.errors import ConflictError, StoreError, ValidationError
from inputs_api.db.models import CategoryFactor
from inputs_api.services.categories import CategoryRepository

logger = logging.getLogger(__name__)

# Factors are append-only: there is no update or delete path.
# The exists-check and the insert are separate statements, so two concurrent
# requests for the same value can both pass the check and both insert.


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not isinstance(value, str) or value.strip() == ""


def add_factor(db: Session, input_name: Optional[str], new_factor: Optional[str]) -> CategoryFactor:
    # Append `new_factor` to category `input_name`, registering the category on first use

    if _is_blank(input_name) or _is_blank(new_factor):
        raise ValidationError("Missing inputName or newFactor", code="MISSING_FIELD")

    repo = CategoryRepository(db)
    try:
        if repo.find_factor(input_name, new_factor) is not None:
            raise ConflictError("Factor already exists", code="FACTOR_EXISTS")

        row = repo.add_factor(input_name, new_factor)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error adding factor")
        raise StoreError("Server error") from exc

    logger.info('Added "%s" to "%s" category', new_factor, input_name)
    return row
