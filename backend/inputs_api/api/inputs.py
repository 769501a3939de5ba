# HTTP Routes for the questionnaire inputs (request/response shapes, calls the services)
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from inputs_api.core.errors import InputsError
from inputs_api.db.session import get_db
from inputs_api.services.categories import list_all_categories, list_client_categories, list_seeded_inputs
from inputs_api.services.factors import add_factor
from inputs_api.services.storage import SubmissionStore

router = APIRouter(prefix="/inputs", tags=["inputs"])


# ---------- request models ----------

# Fields are loosely typed so the services, not FastAPI, reject bad values with a 400

class SubmitRequest(BaseModel):
    responses: Any = None
    role: Any = None


class AddFactorRequest(BaseModel):
    inputName: Any = None
    newFactor: Any = None


class SearchRequest(BaseModel):
    responses: Any = None


# ---------- endpoints ----------

@router.get("/")
def get_all_inputs(db: Session = Depends(get_db)):
    """Seeded form nodes, ordered by their `order` field."""
    try:
        return list_seeded_inputs(db)
    except InputsError as err:
        raise err.to_http_exception() from err


@router.get("/client")
def get_client_inputs(db: Session = Depends(get_db)):
    try:
        return list_client_categories(db)
    except InputsError as err:
        raise err.to_http_exception() from err


@router.get("/therapist")
def get_therapist_inputs(db: Session = Depends(get_db)):
    try:
        return list_all_categories(db)
    except InputsError as err:
        raise err.to_http_exception() from err


@router.post("/submit")
def process_inputs(req: Optional[SubmitRequest] = Body(default=None), db: Session = Depends(get_db)):
    """
    Save a client or therapist submission.
    400 when `responses`/`role` is missing or the role is unknown.
    """
    if req is None:
        req = SubmitRequest()
    try:
        SubmissionStore(db).submit(req.role, req.responses)
    except InputsError as err:
        raise err.to_http_exception() from err
    return {"result": "saved"}


@router.post("/add-factor", status_code=201)
def add_input_factor(req: Optional[AddFactorRequest] = Body(default=None), db: Session = Depends(get_db)):
    """
    Append a new selectable value to a category.
    409 if the exact value is already there.
    """
    if req is None:
        req = AddFactorRequest()
    try:
        add_factor(db, req.inputName, req.newFactor)
    except InputsError as err:
        raise err.to_http_exception() from err
    return {"message": "Factor added successfully"}


@router.post("/search")
def search_inputs(req: Optional[SearchRequest] = Body(default=None), db: Session = Depends(get_db)):
    # an empty "result" means nothing matched
    if req is None:
        req = SearchRequest()
    try:
        result = SubmissionStore(db).search(req.responses)
    except InputsError as err:
        raise err.to_http_exception() from err
    return {"result": result}
