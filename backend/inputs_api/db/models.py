import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Enum,
    JSON,
)
from sqlalchemy.sql import func

from inputs_api.db.base import Base


class SubmissionRole(str, enum.Enum): # who filled in the form
    CLIENT = "client"
    THERAPIST = "therapist"


class InputNode(Base): # pre-seeded form field; read-only to the API
    __tablename__ = "inputnodes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    label = Column(String, nullable=False)
    factors = Column(JSON, nullable=False, default=list)     # dropdown options, in display order
    depends_on = Column(String, nullable=True, default=None) # which field this input depends on
    order = Column(Integer, nullable=False, default=0)       # UI render order

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "label": self.label,
            "factors": list(self.factors or []),
            "dependsOn": self.depends_on,
            "order": self.order,
        }


class Category(Base): # registry of known category names; a category may have no factors yet
    __tablename__ = "categories"

    name = Column(String, primary_key=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CategoryFactor(Base): # one selectable value of a category
    __tablename__ = "category_factors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_name = Column(String, ForeignKey("categories.name"), nullable=False, index=True)

    # No unique constraint on (category_name, factor): duplicates are prevented by a lookup before insert only.
    factor = Column(String, nullable=True)
    points_to = Column(String, nullable=True) # stored with imported data, not returned by any endpoint

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Relationship(Base): # "Name depends on DependsOn" lookup rows
    __tablename__ = "relationships"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    depends_on = Column(String, nullable=True) # comma-separated category names, never validated


class SubmissionMixin: # both roles share one shape but live in separate tables
    id = Column(Integer, primary_key=True, autoincrement=True)
    role = Column(Enum(SubmissionRole), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    responses = Column(JSON, nullable=False, default=dict) # question id -> answer


class ClientSubmission(SubmissionMixin, Base):
    __tablename__ = "client_submissions"


class TherapistSubmission(SubmissionMixin, Base):
    __tablename__ = "therapist_submissions"


SUBMISSION_MODELS = {
    SubmissionRole.CLIENT: ClientSubmission,
    SubmissionRole.THERAPIST: TherapistSubmission,
}
