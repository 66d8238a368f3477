"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from app.api.schemas import (
    CampaignGenerationRequest,
    CampaignResponse,
    ConfigStatusResponse,
    ContentGenerationRequest,
    GenerationResponse,
    OptimizationRequest,
    OptimizationResponse,
)
from app.config import AppSettings, config_status, get_settings
from app.domain.errors import (
    GenerationFailedError,
    RateLimitError,
    StorageError,
    UnsupportedContentTypeError,
)
from app.domain.interfaces import VideoProvider
from app.services.artifact_storage import S3ArtifactStorage
from app.services.openai_client import OpenAIChatModel, OpenAIImageModel, OpenAISpeechModel
from app.services.orchestrator import ContentOrchestrator, campaign_items_per_type
from app.services.placeholders import PlaceholderGenerator
from app.services.polling import PollingPolicy
from app.services.video_providers import DIDVideoProvider, PikaVideoProvider, RunwayVideoProvider

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging(get_settings().service.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Content Generation Service")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to return the error type alongside the message."""
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": f"{type(exc).__name__}: {exc}", "error_type": type(exc).__name__},
    )


def _polling_policy(settings: AppSettings, max_attempts: int) -> PollingPolicy:
    polling = settings.polling
    return PollingPolicy(
        interval_seconds=polling.interval_seconds,
        max_attempts=max_attempts,
        backoff_factor=polling.backoff_factor,
        max_interval_seconds=polling.max_interval_seconds,
        jitter_seconds=polling.jitter_seconds,
        deadline_seconds=polling.deadline_seconds,
    )


def _build_video_providers(settings: AppSettings) -> List[VideoProvider]:
    """D-ID first, then Pika, then Runway; the orchestrator uses the first configured one."""
    return [
        DIDVideoProvider(
            settings.did.api_key,
            settings.did.base_url,
            _polling_policy(settings, DIDVideoProvider.max_attempts),
        ),
        PikaVideoProvider(
            settings.pika.api_key,
            settings.pika.base_url,
            _polling_policy(settings, PikaVideoProvider.max_attempts),
        ),
        RunwayVideoProvider(
            settings.runway.api_key,
            settings.runway.base_url,
            _polling_policy(settings, RunwayVideoProvider.max_attempts),
        ),
    ]


@lru_cache(maxsize=1)
def get_orchestrator() -> ContentOrchestrator:
    settings = get_settings()
    openai = settings.openai
    aws = settings.aws

    storage = S3ArtifactStorage(
        bucket=aws.bucket,
        region=aws.region,
        access_key=aws.access_key,
        secret_key=aws.secret_key,
        endpoint_url=aws.endpoint_url or None,
        public_base_url=aws.public_base_url or None,
    )
    if not settings.openai_configured:
        logger.warning("OpenAI API key not configured, generation will return placeholder content")
    if not storage.is_configured:
        logger.warning("S3 storage not configured, placeholders will use mock URLs")

    return ContentOrchestrator(
        chat_model=OpenAIChatModel(
            openai.api_key,
            model=openai.chat_model,
            base_url=openai.base_url,
            timeout=openai.timeout,
            max_retries=openai.max_retries,
        ),
        image_model=OpenAIImageModel(openai.api_key, model=openai.image_model, base_url=openai.base_url),
        speech_model=OpenAISpeechModel(openai.api_key, model=openai.tts_model, base_url=openai.base_url),
        storage=storage,
        placeholders=PlaceholderGenerator(storage, aws.mock_url_base),
        video_providers=_build_video_providers(settings),
    )


def _raise_http_error(exc: Exception) -> None:
    if isinstance(exc, UnsupportedContentTypeError):
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if isinstance(exc, RateLimitError):
        raise HTTPException(status_code=429, detail=RateLimitError.user_message) from exc
    if isinstance(exc, StorageError):
        raise HTTPException(status_code=502, detail=f"Failed to save generated content: {exc}") from exc
    if isinstance(exc, GenerationFailedError):
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    raise exc


@app.post("/content/generate", response_model=GenerationResponse)
def generate_content(
    request: ContentGenerationRequest, orchestrator: ContentOrchestrator = Depends(get_orchestrator)
):
    try:
        result = orchestrator.generate_content(request)
    except (UnsupportedContentTypeError, RateLimitError, StorageError, GenerationFailedError) as exc:
        logger.error("Content generation failed for %s: %s", request.content_type, exc)
        _raise_http_error(exc)
    return GenerationResponse.model_validate(result.model_dump())


@app.post("/campaigns/generate", response_model=CampaignResponse)
def generate_campaign(
    request: CampaignGenerationRequest, orchestrator: ContentOrchestrator = Depends(get_orchestrator)
):
    try:
        results = orchestrator.generate_campaign(request)
    except RateLimitError as exc:
        _raise_http_error(exc)
    requested = campaign_items_per_type(request) * len(request.platforms) * len(request.content_types)
    return CampaignResponse(results=results, requested=requested, generated=len(results))


@app.post("/content/optimize", response_model=OptimizationResponse)
def optimize_content(
    request: OptimizationRequest, orchestrator: ContentOrchestrator = Depends(get_orchestrator)
):
    try:
        variations = orchestrator.optimize_content(request)
    except (RateLimitError, StorageError, GenerationFailedError) as exc:
        _raise_http_error(exc)
    return OptimizationResponse(optimization_type=request.optimization_type, variations=variations)


@app.get("/config-status", response_model=ConfigStatusResponse)
def get_config_status(settings: AppSettings = Depends(get_settings)):
    return ConfigStatusResponse(**config_status(settings))


@app.get("/health")
def healthcheck():
    return {"status": "ok"}
