# Domain errors raised by the services and their translation into HTTP responses
from datetime import datetime, timezone

from fastapi import HTTPException

from inputs_api.core import config


def build_meta() -> dict: # server-authored metadata with an ISO-8601 UTC timestamp
    now_utc = datetime.now(timezone.utc)
    ts = now_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    return {
        "version": config.API_VERSION,
        "timestamp": ts
    }


class InputsError(Exception):
    status_code = 500
    code = "INTERNAL"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "error": {"code": self.code, "message": self.message},
                "meta": build_meta(),
            },
        )


class ValidationError(InputsError):
    """Caller omitted a required field or sent a value outside the allowed set."""
    status_code = 400
    code = "VALIDATION"


class ConflictError(InputsError):
    """The value being added already exists."""
    status_code = 409
    code = "CONFLICT"


class StoreError(InputsError):
    """
    Anything that went wrong talking to the database.
    The message is kept generic; the underlying exception is chained and logged.
    """
    status_code = 500
    code = "STORE_ERROR"
