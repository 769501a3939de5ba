# Submission persistence (one table per role) and first-match search over therapist submissions
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inputs_api.core.errors import StoreError, ValidationError
from inputs_api.db.models import SUBMISSION_MODELS, SubmissionRole, TherapistSubmission

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _check_responses(responses: Mapping[str, Any]) -> None:
    # Responses land in a JSON column: string keys, serializable values
    if any(not isinstance(k, str) for k in responses.keys()):
        raise ValidationError("responses keys must be strings", code="INVALID_RESPONSES")
    try:
        json.dumps(responses)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"responses is not JSON-serializable: {e}", code="INVALID_RESPONSES")


def _parse_role(role: Optional[str]) -> SubmissionRole:
    try:
        return SubmissionRole(role)
    except (TypeError, ValueError):
        raise ValidationError("Invalid role submitted", code="INVALID_ROLE")


def _answers_match(stored: Any, wanted: str) -> bool:
    # a missing or non-text stored answer never matches
    return isinstance(stored, str) and stored.lower() == wanted.lower()


class SubmissionStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def submit(self, role: Optional[str], responses: Optional[Mapping[str, Any]]) -> None:
        """
        Save one submission into the table for its role.
        Nothing is returned to the caller; identical payloads produce separate rows.
        """
        if not responses or not role:
            raise ValidationError("Missing data in submission", code="MISSING_DATA")
        if not isinstance(responses, Mapping):
            raise ValidationError("responses must be an object", code="INVALID_RESPONSES")

        submission_role = _parse_role(role)
        _check_responses(responses)

        model = SUBMISSION_MODELS[submission_role]
        row = model(role=submission_role, submitted_at=utc_now(), responses=dict(responses))

        logger.info("Saving %s submission with %d responses", submission_role.value, len(responses))
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error saving submission")
            raise StoreError("Failed to save submission") from exc

        logger.info("Submission saved to %s", model.__tablename__)

    def search(self, responses: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Return the responses of the first therapist submission (oldest first) that agrees,
        ignoring case, with every non-blank answer in `responses`.
        No match is an empty dict, not an error.
        """
        if not responses:
            raise ValidationError("No search data provided", code="NO_SEARCH_DATA")
        if not isinstance(responses, Mapping):
            raise ValidationError("responses must be an object", code="INVALID_RESPONSES")

        # Only compare keys that have a non-empty text value
        wanted = {k: v for k, v in responses.items() if isinstance(v, str) and v.strip() != ""}
        logger.debug("Searching therapist submissions on %s", sorted(wanted))

        # TODO: index answers per question once the therapist table outgrows a full scan
        try:
            submissions = self.db.query(TherapistSubmission).order_by(TherapistSubmission.id.asc()).all()
        except SQLAlchemyError as exc:
            logger.exception("Error during search")
            raise StoreError("Search failed") from exc

        for submission in submissions:
            stored = submission.responses or {}
            if all(_answers_match(stored.get(k), v) for k, v in wanted.items()):
                return dict(stored)

        return {}
