# Runtime settings, read once from the environment (backend/.env is loaded if present)
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


API_VERSION = os.getenv("API_VERSION", "0.1.0")     # reported in every error "meta" block

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./inputs.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

# Category names starting with any of these prefixes are internal and never listed in the therapist view.
RESERVED_PREFIXES = {
    "strict": ("system.", "relationships", "inputnodes", "extratherapeutic", "therapist", "client"),
    "short": ("system.", "relationships", "inputnodes", "extratherapeutic"),
}

RESERVED_PREFIX_POLICY = os.getenv("RESERVED_PREFIX_POLICY", "strict").strip().lower()
if RESERVED_PREFIX_POLICY not in RESERVED_PREFIXES:
    raise RuntimeError(
        f"RESERVED_PREFIX_POLICY must be one of {sorted(RESERVED_PREFIXES)}, got '{RESERVED_PREFIX_POLICY}'."
    )

TITLE_CASE_THERAPIST_FACTORS = _env_bool("TITLE_CASE_THERAPIST_FACTORS", True)

# The client form always shows exactly these categories, in this order.
# "extratheraputic factors" is the stored collection name; do not fix the spelling.
CLIENT_CATEGORIES = (
    "treatment",
    "mediators",
    "extratheraputic factors",
    "clinical outcome in patient",
)
