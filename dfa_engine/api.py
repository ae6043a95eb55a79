"""
DFA Engine API

FastAPI-based REST API exposing the structural validator and the executor.

Security features:
  - Input sanitization (max input length, control characters rejected)
  - Malformed DFA documents answered with 400 and an {error, error_type, hint} body
  - Rate limiting via slowapi
  - Optional API key authentication (set API_KEY env var to enable)
"""

import os
import re
import time
import traceback
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, field_validator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import Response

from . import __version__
from .engine import DFAEngine
from .errors import DFAFormatError
from .export import from_dict, to_dot, to_json
from .logging_config import setup_logging
from .models import DFA, ProcessingResult, SimulationTrace, ValidationResult
from .validator import validate_dfa

log = structlog.get_logger(__name__)

# --- Rate Limiter ---
limiter = Limiter(key_func=get_remote_address)
SIMULATE_RATE_LIMIT = os.environ.get("SIMULATE_RATE_LIMIT", "120/minute")

# --- API Key Auth (optional) ---
API_KEY = os.environ.get("API_KEY")  # Set to enable auth; unset = disabled
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: Optional[str] = Security(api_key_header)):
    """Validate API key if API_KEY env var is set. No-op when unset."""
    if API_KEY is None:
        return
    if api_key != API_KEY:
        raise HTTPException(
            status_code=401,
            detail={
                "error": "Invalid or missing API key",
                "error_type": "AuthenticationError",
                "hint": "Provide a valid X-API-Key header.",
            },
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(file_output=bool(os.environ.get("LOG_DIR")))
    log.info("api_started", version=__version__, auth_enabled=API_KEY is not None)
    yield
    log.info("api_stopped")


app = FastAPI(
    title="DFA Engine API",
    version=__version__,
    description="Deterministic Finite Automaton validation and simulation",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- CORS Configuration ---
ALLOWED_ORIGINS = os.environ.get(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:3000",
).split(",")

if os.environ.get("ENVIRONMENT") == "development":
    ALLOWED_ORIGINS = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Input Sanitization Constants ---
MAX_INPUT_LENGTH = 10_000
_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


# --- Request Models ---

class DFARequest(BaseModel):
    # decoded by decode_dfa so format problems come back as 400
    dfa: Dict[str, Any]


class RunRequest(DFARequest):
    input: str = ""

    @field_validator("input", mode="before")
    @classmethod
    def check_input(cls, v) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("Input must be a string.")
        if len(v) > MAX_INPUT_LENGTH:
            raise ValueError(f"Input exceeds maximum length of {MAX_INPUT_LENGTH} characters.")
        if _CONTROL_CHAR_RE.search(v):
            raise ValueError("Input must not contain control characters.")
        return v


class HealthResponse(BaseModel):
    status: str
    message: str
    version: str = __version__


def _internal_error(request_id: str, e: Exception) -> HTTPException:
    log.error("unexpected_error", request_id=request_id, error=str(e), tb=traceback.format_exc())
    return HTTPException(
        status_code=500,
        detail={
            "error": f"Internal server error: {e}",
            "error_type": "RuntimeError",
            "hint": "An unexpected error occurred. Check server logs for details.",
        },
    )


def decode_dfa(request_id: str, data: Dict[str, Any]) -> DFA:
    try:
        return from_dict(data)
    except DFAFormatError as e:
        log.warning("dfa_decode_failed", request_id=request_id, error=str(e))
        raise HTTPException(
            status_code=400,
            detail={
                "error": str(e),
                "error_type": "DFAFormatError",
                "hint": "Send the DFA in the editor JSON shape (fromStateId, initialStateId, ...).",
            },
        )


# --- API Endpoints ---

@app.get("/health", response_model=HealthResponse)
@limiter.limit("60/minute")
async def health_check(request: Request):
    return HealthResponse(status="healthy", message="DFA Engine API is running")


@app.post("/validate", response_model=ValidationResult, dependencies=[Depends(verify_api_key)])
@limiter.limit(SIMULATE_RATE_LIMIT)
async def validate(request: Request, payload: DFARequest):
    """Structural audit of a DFA definition."""
    request_id = str(uuid.uuid4())[:8]
    dfa = decode_dfa(request_id, payload.dfa)
    try:
        return validate_dfa(dfa)
    except Exception as e:
        raise _internal_error(request_id, e)


@app.post("/simulate", response_model=ProcessingResult, dependencies=[Depends(verify_api_key)])
@limiter.limit(SIMULATE_RATE_LIMIT)
async def simulate(request: Request, payload: RunRequest):
    """
    Run an input string through the DFA.

    Rejections and failures (invalid symbols, missing transitions) are
    returned with status 200; the `outcome` field tells them apart.
    """
    request_id = str(uuid.uuid4())[:8]
    t_start = time.time()
    dfa = decode_dfa(request_id, payload.dfa)
    try:
        result = DFAEngine(dfa).process_string(payload.input)
    except Exception as e:
        raise _internal_error(request_id, e)
    log.info(
        "simulate_complete",
        request_id=request_id,
        dfa_id=dfa.id,
        outcome=result.outcome.value,
        total_ms=round((time.time() - t_start) * 1000, 1),
    )
    return result


@app.post("/steps", response_model=SimulationTrace, dependencies=[Depends(verify_api_key)])
@limiter.limit(SIMULATE_RATE_LIMIT)
async def steps(request: Request, payload: RunRequest):
    """Step-by-step trace with the status the walk ended in."""
    request_id = str(uuid.uuid4())[:8]
    dfa = decode_dfa(request_id, payload.dfa)
    try:
        return DFAEngine(dfa).get_simulation_trace(payload.input)
    except Exception as e:
        raise _internal_error(request_id, e)


# --- Export Endpoints ---

@app.post("/export/json", dependencies=[Depends(verify_api_key)])
@limiter.limit("30/minute")
async def export_json(request: Request, payload: DFARequest):
    dfa = decode_dfa(str(uuid.uuid4())[:8], payload.dfa)
    return Response(
        content=to_json(dfa),
        media_type="application/json",
        headers={"Content-Disposition": "attachment; filename=dfa_export.json"},
    )


@app.post("/export/dot", dependencies=[Depends(verify_api_key)])
@limiter.limit("30/minute")
async def export_dot(request: Request, payload: DFARequest):
    dfa = decode_dfa(str(uuid.uuid4())[:8], payload.dfa)
    return Response(
        content=to_dot(dfa),
        media_type="text/vnd.graphviz",
        headers={"Content-Disposition": "attachment; filename=dfa_export.dot"},
    )


@app.get("/")
async def root():
    return {
        "name": "DFA Engine API",
        "version": __version__,
        "endpoints": {
            "/health": "Health check (GET)",
            "/validate": "Structural validation report (POST)",
            "/simulate": "Accept/reject verdict for an input string (POST)",
            "/steps": "Step-by-step execution trace (POST)",
            "/export/json": "Export DFA as JSON file (POST)",
            "/export/dot": "Export DFA as Graphviz DOT file (POST)",
        },
    }


if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("API_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)
