"""
Relay Service
Handles: forwarding chat messages to the Hugging Face Inference API
Port: 8787

Every exit path answers with the ChatResponse contract ({"reply"} or
{"error"}) and the same CORS headers, so browser clients never see an
opaque network failure for a server-side problem.
"""

import logging
import sys
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
import upstream
from exceptions import (
    InvalidInput,
    MethodNotAllowed,
    RelayError,
    ServerMisconfigured,
    UnexpectedServerError,
    UpstreamEmptyOutput,
    UpstreamError,
)
from models import ChatRequest, ChatResponse, HealthResponse

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

app = FastAPI(title="CyberChat Relay", version="1.0.0")


# ── Helpers ───────────────────────────────────────────────────────────────────

def json_response(body: ChatResponse | HealthResponse, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content=body.model_dump(exclude_none=True),
        status_code=status_code,
        headers=config.CORS_HEADERS,
    )


def get_upstream_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for upstream calls; None means a real network connection."""
    return None


@app.exception_handler(StarletteHTTPException)
async def http_error(_request: Request, exc: StarletteHTTPException):
    return json_response(ChatResponse(error=str(exc.detail)), exc.status_code)


# ── Endpoints ─────────────────────────────────────────────────────────────────

@app.options("/")
async def preflight():
    return Response(status_code=204, headers=config.CORS_HEADERS)


@app.post("/")
async def relay_chat(
    request: Request,
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_upstream_transport),
):
    try:
        try:
            chat_request = ChatRequest.model_validate(await request.json())
        except (ValueError, RecursionError, ValidationError):
            raise InvalidInput()

        token = config.HF_TOKEN
        if not token:
            logger.error("HF_TOKEN is not configured")
            raise ServerMisconfigured()

        status_code, payload = await upstream.query_model(
            chat_request.message, token, transport=transport
        )

        if not 200 <= status_code < 300:
            detail = upstream.upstream_error_message(payload, status_code)
            logger.warning("Upstream returned %s: %s", status_code, detail)
            raise UpstreamError(status_code, detail)

        reply = upstream.extract_generated_text(payload)
        if not reply:
            logger.warning("Upstream returned no usable generated_text")
            raise UpstreamEmptyOutput()
    except RelayError:
        raise
    except Exception:
        logger.exception("Unexpected relay failure")
        raise UnexpectedServerError()

    return json_response(ChatResponse(reply=reply))


@app.api_route("/", methods=["GET", "PUT", "PATCH", "DELETE", "HEAD"])
async def method_not_allowed():
    raise MethodNotAllowed()


@app.get("/health")
async def health():
    return json_response(HealthResponse(status="ok", service="relay"))


if __name__ == "__main__":
    import uvicorn
    logger.info("Relay Service starting on port %s", config.RELAY_PORT)
    uvicorn.run("main:app", host="0.0.0.0", port=config.RELAY_PORT, reload=True)
