"""HTTP API for context building.

Why: Consumable API without business logic; pure delegation.
"""

from typing import Any

try:
    from fastapi import FastAPI, HTTPException
    from pydantic import BaseModel
except ImportError as err:
    raise ImportError(
        "FastAPI not installed. Install with: pip install 'context-fusion[http]'"
    ) from err

from context_fusion.application.dto.context_dto import ContextRequest


class ContextRequestModel(BaseModel):
    """Request model for /v1/context endpoint."""

    question: str
    keywords: list[str] = []
    should_search: bool = True


class ContextResponseModel(BaseModel):
    """Response model for /v1/context endpoint."""

    status: str  # "ok" | "declined" | "error"
    context: str = ""
    blocks: int = 0
    used_tokens: int = 0
    reason: str | None = None
    error: str | None = None


app = FastAPI(title="Context Fusion API", version="0.1.0")
use_case: Any | None = None


@app.on_event("startup")
async def startup_event() -> None:
    """Wire the pipeline once; configuration is immutable afterwards."""
    global use_case

    from context_fusion.config.composition import build_context_use_case

    use_case = build_context_use_case()


@app.post("/v1/context", response_model=ContextResponseModel)
def build_context(req: ContextRequestModel) -> ContextResponseModel:
    """Build grounded context for one question.

    Example:
        POST /v1/context
        {"question": "What is the PTO carry-over rule?", "keywords": ["pto"]}
    """
    if use_case is None:
        raise HTTPException(status_code=503, detail="Service not initialized")

    result = use_case.execute(
        ContextRequest(
            question=req.question,
            keywords=tuple(req.keywords),
            should_search=req.should_search,
        )
    )
    if not result.ok:
        err = result.error
        return ContextResponseModel(status="error", error=f"{type(err).__name__}: {err}")

    bundle = result.value
    return ContextResponseModel(
        status="ok" if bundle.text else "declined",
        context=bundle.text,
        blocks=bundle.blocks,
        used_tokens=bundle.used_tokens,
        reason=bundle.reason,
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "healthy" if use_case is not None else "starting"}
