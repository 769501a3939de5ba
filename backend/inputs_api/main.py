# ------------------------------
# Therapy Inputs API
# Run with: uvicorn inputs_api.main:app --reload   (from backend/)
# ------------------------------
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from inputs_api.core import config
from inputs_api.core.errors import ValidationError
from inputs_api.api import inputs
from inputs_api.db.session import init_db

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("inputs_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()  # create any missing tables before serving
    logger.info("Database ready (%s)", config.DATABASE_URL.split("://", 1)[0])
    yield


app = FastAPI(
    title="Therapy Inputs API",  # Shows up in docs
    version=config.API_VERSION,
    lifespan=lifespan,
)

# The questionnaire frontend is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Bodies FastAPI cannot parse (bad JSON, a list instead of an object) get the same 400 shape as service errors
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    http_exc = ValidationError("Malformed request body", code="INVALID_BODY").to_http_exception()
    logger.info("Rejected body for %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/")
def root():
    return {"message": "API is running. Go to /docs for Swagger UI."}


app.include_router(inputs.router, prefix="/api")
