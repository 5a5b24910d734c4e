from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.schemas import EnhanceResponse, ErrorResponse, HealthResponse
from app.core.context import ServiceContext
from app.core.exceptions import InvalidInputError


router = APIRouter()


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context


@router.post(
    "/enhance",
    response_model=EnhanceResponse,
    status_code=status.HTTP_200_OK,
    summary="Turn a website idea into a blueprint",
    description="Validate and sanitize a one-sentence website idea, then ask the model for a Markdown blueprint.",
    responses={
        200: {
            "description": "Blueprint generated, or the provider is rate limited and a fallback message is returned",
            "content": {
                "application/json": {
                    "example": {
                        "enhanced": "# ⚡ Vibe Coder Blueprint\n## 💡 Strategy & Concept\n* **Project Name:** Lumen"
                    }
                }
            }
        },
        400: {
            "model": ErrorResponse,
            "description": "Input missing, not a string, empty after trimming or longer than 1000 characters",
            "content": {"application/json": {"example": {"error": "Invalid input"}}}
        },
        408: {
            "description": "The provider did not answer before the deadline",
            "content": {"application/json": {"example": {"enhanced": "⚠️ Request timed out."}}}
        },
        500: {
            "description": "Credential, configuration or unclassified provider error, with a fallback message",
            "content": {
                "application/json": {
                    "example": {"enhanced": "# ⚠️ Configuration Error\n\n..."}
                }
            }
        }
    },
    tags=["enhance"]
)
async def enhance(
    payload: Any = Body(default=None),
    context: ServiceContext = Depends(get_context),
):
    try:
        idea = context.input_gate.admit(payload)
    except InvalidInputError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": e.reason},
        )

    outcome = await context.enhancer.enhance(idea)
    return JSONResponse(
        status_code=outcome.status_code,
        content={"enhanced": outcome.enhanced},
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    tags=["health"]
)
async def health_check(context: ServiceContext = Depends(get_context)):
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return HealthResponse(
        status="OK",
        model=context.settings.GEMINI_MODEL,
        timestamp=timestamp,
    )
