import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Optional

import codereview.config as config
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field, ValidationError

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from codereview.errors import ConfigurationError, ExhaustedRetries, InvalidInput
from codereview.prompts import build_review_prompt
from codereview.service import CompletionService, RetryPolicy
from codereview.upstream import build_upstream


@lru_cache
def get_settings():
    try:
        return config.Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


@lru_cache
def get_completion_service() -> CompletionService:
    settings = get_settings()
    upstream = build_upstream(settings)
    return CompletionService(upstream, RetryPolicy.from_settings(settings))


settings = get_settings()

# Initialize Limiter
limiter = Limiter(key_func=get_remote_address)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing or invalid settings must stop the server before it accepts requests
    service = get_completion_service()
    logging.info(f"Review service ready (model: {service.upstream.model})")
    yield


app = FastAPI(
    title="AI Code Review API",
    description="Sends editor code to Gemini and returns a structured review.",
    version="1.0.0",
    lifespan=lifespan,
)

# Register Limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ReviewRequest(BaseModel):
    code: str = Field(..., description="The code to be reviewed.")
    language: Optional[str] = Field(
        None, description="Language selected in the editor."
    )


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ExhaustedRetries)
async def exhausted_retries_handler(request: Request, exc: ExhaustedRetries):
    logging.error(f"Review request failed: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logging.error(f"Configuration Error: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "model": settings.MODEL_NAME}


@app.post("/ai/get-review", tags=["Review"], response_class=PlainTextResponse)
@limiter.limit(settings.RATE_LIMIT)
async def get_review(
    request: Request,
    request_data: ReviewRequest,
    service: CompletionService = Depends(get_completion_service),
):
    prompt = build_review_prompt(request_data.code, request_data.language)
    review = await service.complete(prompt)
    return PlainTextResponse(review)
