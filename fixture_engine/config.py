import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Legs are clamped to this range by the round-robin scheduler
MIN_LEGS = 1
MAX_LEGS = 4
DEFAULT_LEGS = int(os.getenv("DEFAULT_LEGS", "1"))

_seed = os.getenv("FIXTURE_RNG_SEED", "").strip()
FIXTURE_RNG_SEED: Optional[int] = int(_seed) if _seed else None

CORS_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    CORS_ORIGINS.extend(o.strip() for o in _extra.split(",") if o.strip())
