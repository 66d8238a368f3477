"""Deterministic placeholder content used when a generation provider is unavailable."""

from __future__ import annotations

import html
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from app.domain.dto import (
    AudioGenerationRequest,
    BrandContext,
    GenerationMetadata,
    GenerationResult,
    ImageGenerationRequest,
    TextGenerationRequest,
    VideoGenerationRequest,
)
from app.domain.errors import StorageError
from app.domain.interfaces import ArtifactStorage, Payload
from app.services.artifact_storage import build_artifact_key
from app.services.video_providers import parse_duration_seconds
from app.utils import slugify

PLACEHOLDER_PROVIDER = "placeholder"
FALLBACK_MARKER = "Fallback placeholder generated"

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
VIDEO_TEMPLATE_PATH = TEMPLATE_DIR / "video_slideshow.html"

DEFAULT_SECONDARY_COLOR = "#764ba2"


# --- Templates ----------------------------------------------------------------


def _mock_text(content_type: str, brand: BrandContext, goal: str) -> str:
    kind = content_type.lower()
    name = brand.brand_name

    if "blog" in kind or "article" in kind:
        return f"""# How {name} Helps {brand.target_audience}

{brand.product_description}

## Why it matters

Teams in {brand.industry} need tools that keep up with them. {name} was built for exactly that.

## Key benefits

- Built for {brand.target_audience}
- A {brand.tone_style.lower()} experience from day one
- Designed around one goal: {goal}

## Get started

Discover what {name} can do for you today."""

    if "social" in kind or "post" in kind:
        return (
            f"Meet {name}. {brand.product_description}\n\n"
            f"Made for {brand.target_audience}. {goal}.\n\n"
            f"#{slugify(name, 'brand').replace('-', '')} #{slugify(brand.industry, 'industry').replace('-', '')}"
        )

    if "email" in kind:
        return f"""Subject: Discover what {name} can do for you

Hi there,

{brand.product_description}

We built {name} for {brand.target_audience}, and we think you'll love it.

Get started today.

The {name} Team

P.S. {goal}."""

    if "ad" in kind.split() or "ad copy" in kind:
        return f"""{name}: {brand.product_description}

Built for {brand.target_audience}. {goal}.

Try {name} today."""

    return f"""# {content_type} for {name}

Generated marketing content for {name} in the {brand.industry} industry.

Target Audience: {brand.target_audience}
Tone: {brand.tone_style}

## Content

{brand.product_description}

Goal: {goal}"""


def _mock_image_brief(request: ImageGenerationRequest) -> str:
    brand = request.brand
    visual = request.visual
    colors = brand.primary_color + (f" & {brand.secondary_color}" if brand.secondary_color else "")
    return f"""Professional {request.content_type} Placeholder

Brand: {brand.brand_name}
Style: {visual.style}
Mood: {visual.mood}
Colors: {colors}
Platform: {visual.platform or 'General'}

This is a placeholder for professional image content.

Image specifications:
- Dimensions: {visual.dimensions}
- Brand: {brand.brand_name}
- Industry: {brand.industry}
- Target Audience: {brand.target_audience}"""


def _mock_video_script(request: VideoGenerationRequest) -> str:
    brand = request.brand
    video = request.video
    return f"""# Video Script: {request.video_type} for {brand.brand_name}

**Duration:** {video.duration}
**Style:** {brand.tone_style}
**Target:** {brand.target_audience}

## Scene 1 (0-15s)
[Hook] Attention-grabbing opening about {brand.brand_name}

## Scene 2 (15-35s)
[Problem/Solution] Demonstrate how {brand.brand_name} solves customer problems

## Scene 3 (35-50s)
[Benefits] Highlight key benefits for {brand.target_audience}

## Scene 4 (50-60s)
[Call to Action] {video.call_to_action or 'Strong closing with clear next steps'}"""


def _mock_audio_script(request: AudioGenerationRequest) -> str:
    brand = request.brand
    audio = request.audio
    return f"""# Audio Script: {request.audio_type} for {brand.brand_name}

**Duration:** {audio.duration}
**Tone:** {brand.tone_style}
**Purpose:** {audio.purpose}

## Introduction
Welcome and introduction to {brand.brand_name}

## Main Content
{request.content}

Key points for {brand.target_audience} in the {brand.industry} space.

## Conclusion
{audio.call_to_action or 'Summary and call to action'}"""


def render_video_template(request: VideoGenerationRequest, script: str) -> str:
    """Fill the HTML slideshow used in place of a rendered video."""
    brand = request.brand
    values = {
        "brand_name": brand.brand_name,
        "video_type": request.video_type,
        "primary_color": brand.primary_color,
        "secondary_color": brand.secondary_color or DEFAULT_SECONDARY_COLOR,
        "duration": request.video.duration,
        "duration_seconds": str(parse_duration_seconds(request.video.duration)),
        "excerpt": script[:100],
    }
    template = VIDEO_TEMPLATE_PATH.read_text(encoding="utf-8")
    for key, value in values.items():
        template = template.replace(f"{{{{{key}}}}}", html.escape(value))
    return template


# --- Generator ----------------------------------------------------------------


class PlaceholderGenerator:
    """Build placeholder results and persist them on a best-effort basis.

    Methods never raise. When storage is unconfigured or the upload fails,
    the result carries a mock URL under ``mock_url_base``; when building the
    placeholder itself fails, a minimal result is returned instead.
    """

    def __init__(
        self,
        storage: Optional[ArtifactStorage],
        mock_url_base: str,
        *,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._storage = storage
        self._mock_url_base = mock_url_base.rstrip("/")
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    def mock_url(self, file_name: str) -> str:
        return f"{self._mock_url_base}/{file_name}"

    def text(self, request: TextGenerationRequest) -> GenerationResult:
        started = self._clock()
        try:
            content = _mock_text(request.content_type, request.brand, request.requirements.goal)
            return self._persist(
                content,
                folder="content",
                brand_name=request.brand.brand_name,
                content_type=request.content_type,
                notes=[FALLBACK_MARKER, "Configure OpenAI API for AI-generated content", "This is placeholder content"],
                started=started,
            )
        except Exception:
            self._logger.exception("Placeholder text generation failed for %s", request.content_type)
            return self.minimal(request.content_type, started)

    def image(self, request: ImageGenerationRequest) -> GenerationResult:
        started = self._clock()
        try:
            brief = _mock_image_brief(request)
            result = self._persist(
                brief,
                folder="images",
                brand_name=request.brand.brand_name,
                content_type=request.content_type,
                notes=[FALLBACK_MARKER, "Configure OpenAI DALL-E API for real images", "This is placeholder content"],
                started=started,
            )
            return result.model_copy(
                update={
                    "content": (
                        f"Placeholder content for {request.content_type} - "
                        "Configure OpenAI API for real image generation"
                    )
                }
            )
        except Exception:
            self._logger.exception("Placeholder image generation failed for %s", request.content_type)
            return self.minimal(request.content_type, started)

    def video(self, request: VideoGenerationRequest, script: Optional[str] = None) -> GenerationResult:
        """Placeholder script plus an HTML slideshow template under ``video-templates/``."""
        started = self._clock()
        try:
            script = script or _mock_video_script(request)
            page = render_video_template(request, script)
            key = build_artifact_key(
                "video-templates", request.brand.brand_name, request.video_type, "html", self._timestamp_ms()
            )
            storage_url = self._upload(key, page, "text/html")
            if storage_url is None:
                file_name = self._mock_file_name(request.video_type, "html")
                storage_url = self.mock_url(file_name)
            else:
                file_name = key
            return self._result(
                script,
                notes=[FALLBACK_MARKER, "Video template generated", "Configure a video provider for rendered video"],
                started=started,
                storage_url=storage_url,
                file_name=file_name,
                duration_seconds=parse_duration_seconds(request.video.duration),
            )
        except Exception:
            self._logger.exception("Placeholder video generation failed for %s", request.video_type)
            return self.minimal(request.video_type, started)

    def audio(self, request: AudioGenerationRequest) -> GenerationResult:
        started = self._clock()
        try:
            return self._persist(
                _mock_audio_script(request),
                folder="audio",
                brand_name=request.brand.brand_name,
                content_type=request.audio_type,
                notes=[FALLBACK_MARKER, "Configure OpenAI TTS for real audio", "This is placeholder content"],
                started=started,
            )
        except Exception:
            self._logger.exception("Placeholder audio generation failed for %s", request.audio_type)
            return self.minimal(request.audio_type, started)

    def minimal(self, content_type: str, started: Optional[float] = None) -> GenerationResult:
        """Last-resort result that needs nothing but string formatting."""
        file_name = self._mock_file_name(content_type, "txt")
        return self._result(
            f"Placeholder for {content_type} - Services temporarily unavailable",
            notes=[FALLBACK_MARKER, "Basic fallback generated", "Services need configuration"],
            started=started if started is not None else self._clock(),
            storage_url=self.mock_url(file_name),
            file_name=file_name,
        )

    # -- helpers --

    def _persist(
        self,
        content: str,
        *,
        folder: str,
        brand_name: str,
        content_type: str,
        notes: List[str],
        started: float,
    ) -> GenerationResult:
        key = build_artifact_key(
            folder, brand_name, content_type, "txt", self._timestamp_ms(), subfolder="fallback"
        )
        storage_url = self._upload(key, content, "text/plain")
        if storage_url is None:
            file_name = self._mock_file_name(content_type, "txt")
            storage_url = self.mock_url(file_name)
        else:
            file_name = key
        return self._result(content, notes=notes, started=started, storage_url=storage_url, file_name=file_name)

    def _upload(self, key: str, payload: Payload, content_type: str) -> Optional[str]:
        if self._storage is None or not self._storage.is_configured:
            self._logger.info("Storage not configured, using mock URL for %s", key)
            return None
        try:
            return self._storage.put(key, payload, content_type)
        except StorageError as e:
            self._logger.warning("Placeholder upload failed for %s, using mock URL: %s", key, e)
            return None

    def _result(
        self,
        content: str,
        *,
        notes: List[str],
        started: float,
        storage_url: Optional[str],
        file_name: Optional[str],
        duration_seconds: Optional[float] = None,
    ) -> GenerationResult:
        elapsed_ms = max(0, int((self._clock() - started) * 1000))
        return GenerationResult(
            content=content,
            metadata=GenerationMetadata(
                processing_time_ms=elapsed_ms,
                provider=PLACEHOLDER_PROVIDER,
                is_placeholder=True,
                optimization_notes=notes,
                duration_seconds=duration_seconds,
            ),
            storage_url=storage_url,
            file_name=file_name,
        )

    def _timestamp_ms(self) -> int:
        return int(self._clock() * 1000)

    def _mock_file_name(self, content_type: str, extension: str) -> str:
        return f"fallback-{slugify(content_type, 'content')}-{self._timestamp_ms()}.{extension}"


__all__ = ["FALLBACK_MARKER", "PLACEHOLDER_PROVIDER", "PlaceholderGenerator", "render_video_template"]
