"""
FastAPI application server for the Ad Exchange Buyer II examples.

Provides health checks, the example catalogue and example execution.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Depends, Body
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from core.buyer_manager import AdExchangeBuyerManager, create_buyer_manager
from core.config import get_settings
from core.errors import AuthorizationError, BuyerAPIError, InvalidArgumentError
from core.examples import get_example, list_examples, run_example
from security.auth import Operator, Role, TokenSigner, authorize_example, can_run, current_operator

# Configure logging
logging.basicConfig(
    level=get_settings().app_log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# Global state (initialized on startup)
app_state: Dict[str, Any] = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds the buyer manager and token signer on startup.
    """
    logger.info("Starting application...")
    settings = get_settings()
    app_state["settings"] = settings

    buyer_manager = create_buyer_manager(settings)
    app_state["buyer_manager"] = buyer_manager
    logger.info(f"Buyer manager initialized (env={settings.app_env}, mock={settings.use_mock})")

    app.state.token_signer = TokenSigner.from_settings(settings)
    app_state["token_signer"] = app.state.token_signer

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    app_state.clear()
    del app.state.token_signer
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Ad Exchange Buyer II Examples API",
    description="Runs filter set and client buyer examples against the Ad Exchange Buyer II API",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    components: Dict[str, bool]


class ExampleInputParameter(BaseModel):
    """One input parameter of an example."""
    name: str
    display: str
    required: bool


class ExampleDescription(BaseModel):
    """Catalogue entry for an example."""
    slug: str
    name: str
    description: str
    mutates: bool
    runnable: bool
    inputs: List[ExampleInputParameter]


class TokenRequest(BaseModel):
    """Token creation request (dev only)."""
    user_id: str = Field(..., description="User ID")
    role: Role = Field(..., description="User role")


class ErrorResponse(BaseModel):
    """Error response."""
    category: str
    code: str
    message: str
    retryable: bool
    details: Optional[Dict[str, Any]] = None


@app.exception_handler(BuyerAPIError)
async def buyer_api_error_handler(request, exc: BuyerAPIError):
    """Handle BuyerAPIError exceptions."""
    return JSONResponse(
        status_code=exc.error_detail.http_status,
        content=exc.error_detail.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request, exc: RequestValidationError):
    """Render malformed request bodies as INVALID_ARGUMENT."""
    error = InvalidArgumentError(
        "Invalid request",
        details={
            "errors": [
                {"field": ".".join(str(part) for part in e["loc"]), "message": e["msg"]}
                for e in exc.errors()
            ]
        },
    )
    return await buyer_api_error_handler(request, error)


# Health check endpoints

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns overall health status and component statuses.
    """
    manager_ready = isinstance(app_state.get("buyer_manager"), AdExchangeBuyerManager)
    auth_ready = "token_signer" in app_state

    return HealthResponse(
        status="healthy" if manager_ready and auth_ready else "unhealthy",
        version=VERSION,
        components={
            "buyer_manager": manager_ready,
            "auth": auth_ready,
        },
    )


@app.get("/health/ready", tags=["Health"])
async def readiness_check():
    """Readiness check for load balancers."""
    if "buyer_manager" in app_state and "token_signer" in app_state:
        return {"status": "ready"}

    raise HTTPException(status_code=503, detail="Not ready")


# Example endpoints

@app.get(
    "/examples",
    response_model=List[ExampleDescription],
    tags=["Examples"],
)
async def get_examples(operator: Operator = Depends(current_operator)):
    """
    List available examples and their input parameters.

    Any authenticated operator may list; ``runnable`` tells whether the
    caller's role may run the example.
    """
    return [
        {**entry, "runnable": can_run(operator.role, get_example(entry["slug"]))}
        for entry in list_examples()
    ]


@app.post(
    "/examples/{slug}",
    tags=["Examples"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def execute_example(
    slug: str,
    values: Dict[str, Any] = Body(...),
    operator: Operator = Depends(current_operator),
):
    """
    Run an example with the given input values.

    Read-only examples may be run by any role, examples that change
    resources require TRADER role or higher.
    """
    example = get_example(slug)
    authorize_example(operator, example)

    buyer_manager: AdExchangeBuyerManager = app_state["buyer_manager"]
    logger.info(f"User {operator.user_id} running example {slug}")
    result = await run_example(slug, values, buyer_manager)

    return {
        "status": "success",
        "example": example.name,
        "result": result,
    }


# Development/testing endpoints (disabled in production)

@app.post("/dev/token", tags=["Development"])
async def create_dev_token(request: TokenRequest):
    """
    Create a JWT token for development/testing.

    WARNING: This endpoint should be disabled in production.
    """
    if get_settings().is_production:
        raise AuthorizationError("Token creation endpoint disabled in production")

    signer: TokenSigner = app.state.token_signer
    token = signer.issue(request.user_id, request.role)
    return {
        "token": token,
        "user_id": request.user_id,
        "role": request.role.value,
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "apps.api_server:app",
        host=settings.app_host,
        port=settings.app_port,
        workers=1,
        reload=not settings.is_production,
    )
