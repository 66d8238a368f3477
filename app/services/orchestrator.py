"""Application service orchestrating content generation across providers."""

from __future__ import annotations

import logging
import math
import re
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from app.domain.dto import (
    AudioGenerationRequest,
    AudioRequirements,
    CampaignGenerationRequest,
    ContentGenerationRequest,
    ContentKind,
    ContentRequirements,
    GenerationMetadata,
    GenerationResult,
    ImageGenerationRequest,
    OptimizationOptions,
    OptimizationRequest,
    TextGenerationRequest,
    VideoGenerationRequest,
    VideoRenderJob,
    VideoRequirements,
    VisualRequirements,
)
from app.domain.errors import (
    GenerationFailedError,
    RateLimitError,
    StorageError,
    UnsupportedContentTypeError,
)
from app.domain.interfaces import ArtifactStorage, ChatModel, ImageModel, SpeechModel, VideoProvider
from app.services.artifact_storage import build_artifact_key
from app.services.placeholders import PlaceholderGenerator
from app.services.prompt_builder import (
    AUDIO_SYSTEM_PROMPT,
    TEXT_SYSTEM_PROMPT,
    VIDEO_SYSTEM_PROMPT,
    build_audio_prompt,
    build_image_prompt,
    build_optimization_prompt,
    build_text_prompt,
    build_variation_system_prompt,
    build_video_prompt,
    build_video_render_prompt,
)
from app.services.video_providers import parse_duration_seconds

logger = logging.getLogger(__name__)

AUDIO_SCRIPT_THRESHOLD = 100
CAMPAIGN_TEXT_VARIATIONS = 2
SHORT_FORM_PLATFORMS = frozenset({"tiktok", "instagram"})

_TEXT_SAMPLING = {"top_p": 0.9, "frequency_penalty": 0.1, "presence_penalty": 0.1}

_KIND_KEYWORDS = (
    (ContentKind.TEXT, re.compile(r"text|copy|article|email|\bads?\b")),
    (ContentKind.IMAGE, re.compile(r"image|visual|graphic")),
    (ContentKind.VIDEO, re.compile(r"video")),
    (ContentKind.AUDIO, re.compile(r"audio|voice|podcast")),
)


def classify_content_type(content_type: str) -> ContentKind:
    """Map a free-form content type onto a modality; first matching rule wins."""
    normalized = (content_type or "").lower()
    for kind, pattern in _KIND_KEYWORDS:
        if pattern.search(normalized):
            return kind
    raise UnsupportedContentTypeError(f"Unsupported content type: {content_type}")


def campaign_items_per_type(request: CampaignGenerationRequest) -> int:
    """Items per platform and content type needed to reach ``content_volume``."""
    if request.content_volume is None:
        return 1
    per_platform = math.ceil(request.content_volume / len(request.platforms))
    return max(1, math.ceil(per_platform / len(request.content_types)))


class GenerationStage(str, Enum):
    BUILDING_PROMPT = "BUILDING_PROMPT"
    CALLING_PROVIDER = "CALLING_PROVIDER"
    PERSISTING = "PERSISTING"
    FALLBACK = "FALLBACK"
    PERSISTING_FALLBACK = "PERSISTING_FALLBACK"
    DONE = "DONE"
    FATAL = "FATAL"


class _StageTracker:
    """Request-scoped record of the stages one generation call went through."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.stages: List[GenerationStage] = []

    def enter(self, stage: GenerationStage) -> None:
        previous = self.stages[-1].value if self.stages else "START"
        self.stages.append(stage)
        logger.debug("%s: %s -> %s", self.label, previous, stage.value)


@dataclass
class ContentOrchestrator:
    """Coordinate prompt building, provider calls, persistence and fallback."""

    chat_model: ChatModel
    image_model: ImageModel
    speech_model: SpeechModel
    storage: ArtifactStorage
    placeholders: PlaceholderGenerator
    video_providers: Sequence[VideoProvider] = field(default_factory=tuple)
    clock: Callable[[], float] = time.time

    # -- text ----------------------------------------------------------------

    def generate_text(self, request: TextGenerationRequest) -> GenerationResult:
        started = self.clock()

        def primary(tracker: _StageTracker) -> GenerationResult:
            tracker.enter(GenerationStage.BUILDING_PROMPT)
            prompt = build_text_prompt(request)
            logger.info("Generating %s for %s (prompt: %d chars)", request.content_type, request.brand.brand_name, len(prompt))

            tracker.enter(GenerationStage.CALLING_PROVIDER)
            completion = self.chat_model.complete(
                TEXT_SYSTEM_PROMPT, prompt, max_tokens=2000, temperature=0.7, **_TEXT_SAMPLING
            )

            variations: List[str] = []
            variation_count = request.optimization.ab_test_variations or 1
            if variation_count > 1:
                logger.info("Generating %d variations...", variation_count - 1)
            for _ in range(1, variation_count):
                variation = self.chat_model.complete(
                    build_variation_system_prompt(), prompt, max_tokens=2000, temperature=0.8
                )
                variations.append(variation.content)

            tracker.enter(GenerationStage.PERSISTING)
            key = build_artifact_key(
                "content", request.brand.brand_name, request.content_type, "txt", self._timestamp_ms()
            )
            storage_url = self.storage.put(key, completion.content, "text/plain")

            return GenerationResult(
                content=completion.content,
                metadata=GenerationMetadata(
                    processing_time_ms=self._elapsed_ms(started),
                    provider=self.chat_model.name,
                    tokens_used=completion.tokens_used,
                    variations=variations,
                    optimization_notes=[
                        "Content optimized for conversion and engagement",
                        "SEO considerations integrated naturally",
                        "Brand voice consistency maintained",
                        "Target audience psychology leveraged",
                    ],
                ),
                storage_url=storage_url,
                file_name=key,
            )

        return self._run(
            f"text[{request.content_type}]",
            primary,
            lambda: self.placeholders.text(request),
            started=started,
            storage_fatal=False,
        )

    # -- image ---------------------------------------------------------------

    def generate_image(self, request: ImageGenerationRequest) -> GenerationResult:
        started = self.clock()

        def primary(tracker: _StageTracker) -> GenerationResult:
            tracker.enter(GenerationStage.BUILDING_PROMPT)
            prompt = build_image_prompt(request)
            logger.info("Generating image %s for %s (prompt: %d chars)", request.content_type, request.brand.brand_name, len(prompt))

            tracker.enter(GenerationStage.CALLING_PROVIDER)
            output = self.image_model.generate(prompt, size=request.visual.dimensions)

            tracker.enter(GenerationStage.PERSISTING)
            key = build_artifact_key(
                "images", request.brand.brand_name, request.content_type, "png", self._timestamp_ms()
            )
            storage_url = self.storage.put(key, output.binary or b"", output.content_type or "image/png")

            return GenerationResult(
                content=f"Professional {request.content_type} image generated for {request.brand.brand_name}",
                metadata=GenerationMetadata(
                    processing_time_ms=self._elapsed_ms(started),
                    provider=self.image_model.name,
                    source_url=output.source_url,
                    optimization_notes=[
                        "High-resolution, professional quality",
                        "Brand colors and personality integrated",
                        "Platform-optimized composition",
                        "Conversion-focused visual hierarchy",
                    ],
                ),
                storage_url=storage_url,
                file_name=key,
            )

        return self._run(
            f"image[{request.content_type}]",
            primary,
            lambda: self.placeholders.image(request),
            started=started,
            storage_fatal=False,
        )

    # -- video ---------------------------------------------------------------

    def generate_video(
        self, request: VideoGenerationRequest, *, cancel_event: Optional[threading.Event] = None
    ) -> GenerationResult:
        """Write a script, persist it, and render it with the first configured video provider."""
        started = self.clock()
        generated: dict = {}

        def primary(tracker: _StageTracker) -> GenerationResult:
            brand = request.brand
            video = request.video

            tracker.enter(GenerationStage.BUILDING_PROMPT)
            prompt = build_video_prompt(request)

            tracker.enter(GenerationStage.CALLING_PROVIDER)
            completion = self.chat_model.complete(VIDEO_SYSTEM_PROMPT, prompt, max_tokens=2500, temperature=0.7)
            script = completion.content
            generated["script"] = script

            tracker.enter(GenerationStage.PERSISTING)
            timestamp = self._timestamp_ms()
            script_key = build_artifact_key("video-scripts", brand.brand_name, request.video_type, "md", timestamp)
            storage_url = self.storage.put(script_key, script, "text/markdown")
            file_name = script_key
            provider_name = self.chat_model.name
            source_url = None
            duration_seconds = parse_duration_seconds(video.duration)

            provider = self._select_video_provider()
            if video.render_video and provider is not None:
                tracker.enter(GenerationStage.CALLING_PROVIDER)
                job = VideoRenderJob(
                    script=script,
                    prompt=build_video_render_prompt(brand.brand_name, request.video_type, video.duration, script),
                    duration_seconds=duration_seconds,
                    brand_name=brand.brand_name,
                    video_type=request.video_type,
                    style=video.style,
                    voice_id=video.voice_id,
                )
                output = provider.generate(job, cancel_event=cancel_event)

                tracker.enter(GenerationStage.PERSISTING)
                video_key = build_artifact_key("videos", brand.brand_name, request.video_type, "mp4", timestamp)
                storage_url = self.storage.put(video_key, output.binary or b"", output.content_type or "video/mp4")
                file_name = video_key
                provider_name = provider.name
                source_url = output.source_url
            elif video.render_video:
                logger.info("No video provider configured, returning script only")

            return GenerationResult(
                content=script,
                metadata=GenerationMetadata(
                    processing_time_ms=self._elapsed_ms(started),
                    provider=provider_name,
                    tokens_used=completion.tokens_used,
                    source_url=source_url,
                    duration_seconds=duration_seconds,
                    optimization_notes=[
                        "Complete production-ready script",
                        "Platform-specific optimization",
                        "Engagement-maximized structure",
                        "Professional production guidelines",
                    ],
                ),
                storage_url=storage_url,
                file_name=file_name,
            )

        return self._run(
            f"video[{request.video_type}]",
            primary,
            lambda: self.placeholders.video(request, script=generated.get("script")),
            started=started,
            storage_fatal=True,
        )

    # -- audio ---------------------------------------------------------------

    def generate_audio(self, request: AudioGenerationRequest) -> GenerationResult:
        started = self.clock()

        def primary(tracker: _StageTracker) -> GenerationResult:
            audio = request.audio
            script = request.content
            tokens_used = None

            if len(request.content) < AUDIO_SCRIPT_THRESHOLD:
                tracker.enter(GenerationStage.BUILDING_PROMPT)
                prompt = build_audio_prompt(request)
                tracker.enter(GenerationStage.CALLING_PROVIDER)
                completion = self.chat_model.complete(AUDIO_SYSTEM_PROMPT, prompt, max_tokens=1500, temperature=0.7)
                script = completion.content or request.content
                tokens_used = completion.tokens_used

            tracker.enter(GenerationStage.CALLING_PROVIDER)
            speech = self.speech_model.synthesize(script, voice=audio.voice, speed=audio.speed)

            tracker.enter(GenerationStage.PERSISTING)
            key = build_artifact_key(
                "audio", request.brand.brand_name, request.audio_type, "mp3", self._timestamp_ms()
            )
            storage_url = self.storage.put(key, speech.binary or b"", speech.content_type or "audio/mpeg")

            return GenerationResult(
                content=script,
                metadata=GenerationMetadata(
                    processing_time_ms=self._elapsed_ms(started),
                    provider=self.speech_model.name,
                    tokens_used=tokens_used,
                    duration_seconds=parse_duration_seconds(audio.duration),
                    optimization_notes=[
                        "Professional studio-quality audio",
                        "Optimized script for audio delivery",
                        "Brand-appropriate voice characteristics",
                        "Engagement-focused pacing and tone",
                    ],
                ),
                storage_url=storage_url,
                file_name=key,
            )

        return self._run(
            f"audio[{request.audio_type}]",
            primary,
            lambda: self.placeholders.audio(request),
            started=started,
            storage_fatal=True,
        )

    # -- routing -------------------------------------------------------------

    def generate_content(
        self, request: ContentGenerationRequest, *, cancel_event: Optional[threading.Event] = None
    ) -> GenerationResult:
        """Route an API request to the matching modality."""
        kind = classify_content_type(request.content_type)
        requirements = request.requirements
        logger.info("Routing %s to %s generation", request.content_type, kind.value)

        if kind == ContentKind.TEXT:
            return self.generate_text(
                TextGenerationRequest(
                    content_type=request.template_type,
                    brand=request.brand,
                    requirements=requirements,
                    optimization=request.optimization or OptimizationOptions(),
                )
            )

        if kind == ContentKind.IMAGE:
            visual = request.visual_requirements
            return self.generate_image(
                ImageGenerationRequest(
                    content_type=request.template_type,
                    brand=request.brand,
                    visual=VisualRequirements(
                        style=(visual and visual.style) or "professional",
                        mood=(visual and visual.mood) or "engaging",
                        composition=(visual and visual.composition) or "dynamic",
                        platform=requirements.platform,
                        dimensions=(visual and visual.dimensions) or "1024x1024",
                    ),
                    accessibility_needs=bool(request.optimization and request.optimization.accessibility_needs),
                )
            )

        if kind == ContentKind.VIDEO:
            video = request.video_requirements
            audio = request.audio_requirements
            duration = (video and video.duration) or (audio and audio.duration) or "60 seconds"
            return self.generate_video(
                VideoGenerationRequest(
                    video_type=request.template_type,
                    brand=request.brand,
                    video=VideoRequirements(
                        goal=requirements.goal,
                        duration=duration,
                        platform=requirements.platform or "social media",
                        key_messages=requirements.key_messages,
                        call_to_action=requirements.call_to_action,
                        style=video.style if video else None,
                        voice_id=video.voice_id if video else None,
                        render_video=video.render_video if video else True,
                    ),
                ),
                cancel_event=cancel_event,
            )

        audio = request.audio_requirements
        return self.generate_audio(
            AudioGenerationRequest(
                audio_type=request.template_type,
                content=requirements.additional_context or requirements.goal,
                brand=request.brand,
                audio=AudioRequirements(
                    purpose=(audio and audio.purpose) or requirements.goal,
                    duration=(audio and audio.duration) or "30 seconds",
                    call_to_action=requirements.call_to_action,
                    voice=(audio and audio.voice) or "nova",
                    speed=(audio and audio.speed) or 1.0,
                ),
            )
        )

    def generate_campaign(self, request: CampaignGenerationRequest) -> List[GenerationResult]:
        """Generate every platform × content type pairing; failed items are skipped unless rate limited."""
        per_type = campaign_items_per_type(request)
        requested = per_type * len(request.platforms) * len(request.content_types)
        results: List[GenerationResult] = []
        for platform in request.platforms:
            for content_type in request.content_types:
                for index in range(per_type):
                    try:
                        results.append(self._generate_campaign_item(request, platform, content_type))
                    except RateLimitError:
                        raise
                    except Exception as e:
                        logger.error(
                            "Failed to generate %s %s #%d: %s", platform, content_type, index + 1, e, exc_info=True
                        )
        logger.info("Campaign %s generated %d/%d items", request.name, len(results), requested)
        return results

    def _generate_campaign_item(
        self, request: CampaignGenerationRequest, platform: str, content_type: str
    ) -> GenerationResult:
        kind = classify_content_type(content_type)
        brand = request.brand
        label = f"{platform} {content_type}"
        key_messages = [f"Campaign: {request.name}", f"Platform: {platform}"]
        call_to_action = f"Learn more about {brand.brand_name}"

        if kind == ContentKind.TEXT:
            return self.generate_text(
                TextGenerationRequest(
                    content_type=label,
                    brand=brand,
                    requirements=ContentRequirements(
                        goal=request.campaign_goal,
                        platform=platform,
                        content_length="medium",
                        key_messages=key_messages,
                        call_to_action=call_to_action,
                        additional_context=f"Part of {request.name} campaign. {request.description or ''}".strip(),
                    ),
                    optimization=OptimizationOptions(
                        seo_keywords=[brand.brand_name, brand.industry] if request.seo_focus else [],
                        ab_test_variations=CAMPAIGN_TEXT_VARIATIONS if request.ab_testing else 1,
                    ),
                )
            )
        if kind == ContentKind.IMAGE:
            return self.generate_image(
                ImageGenerationRequest(
                    content_type=label,
                    brand=brand,
                    visual=VisualRequirements(platform=platform),
                    accessibility_needs=request.accessibility,
                )
            )
        if kind == ContentKind.VIDEO:
            short_form = platform.lower() in SHORT_FORM_PLATFORMS
            return self.generate_video(
                VideoGenerationRequest(
                    video_type=label,
                    brand=brand,
                    video=VideoRequirements(
                        goal=request.campaign_goal,
                        duration=request.duration or ("30 seconds" if short_form else "60 seconds"),
                        platform=platform,
                        key_messages=key_messages,
                        call_to_action=call_to_action,
                    ),
                )
            )
        return self.generate_audio(
            AudioGenerationRequest(
                audio_type=label,
                content=f"{request.description or request.campaign_goal} Targeting: {brand.target_audience}",
                brand=brand,
                audio=AudioRequirements(
                    purpose=request.campaign_goal,
                    duration=request.duration or "30 seconds",
                    call_to_action=call_to_action,
                ),
            )
        )

    def optimize_content(self, request: OptimizationRequest) -> List[GenerationResult]:
        """Produce ``test_variations`` optimised rewrites, conservative first."""
        results: List[GenerationResult] = []
        for index in range(request.test_variations):
            brief = build_optimization_prompt(
                request.original_content,
                request.optimization_type,
                request.brand,
                index,
                request.target_metrics,
            )
            results.append(
                self.generate_text(
                    TextGenerationRequest(
                        content_type=request.content_type,
                        brand=request.brand,
                        requirements=ContentRequirements(
                            goal=f"Optimize for {request.optimization_type}",
                            additional_context=brief,
                        ),
                        optimization=OptimizationOptions(ab_test_variations=1),
                    )
                )
            )
        return results

    # -- internals -----------------------------------------------------------

    def _run(
        self,
        label: str,
        primary: Callable[[_StageTracker], GenerationResult],
        fallback: Callable[[], GenerationResult],
        *,
        started: float,
        storage_fatal: bool,
    ) -> GenerationResult:
        tracker = _StageTracker(label)
        try:
            result = primary(tracker)
        except RateLimitError as e:
            tracker.enter(GenerationStage.FATAL)
            logger.error("%s: rate limited by %s, not falling back", label, e.provider or "provider")
            raise
        except StorageError as e:
            if storage_fatal:
                tracker.enter(GenerationStage.FATAL)
                logger.error("%s: storage failed, artifact unavailable: %s", label, e)
                raise
            return self._fall_back(tracker, fallback, e, started)
        except Exception as e:
            return self._fall_back(tracker, fallback, e, started)

        tracker.enter(GenerationStage.DONE)
        logger.info("%s completed in %d ms", label, result.metadata.processing_time_ms)
        return result

    def _fall_back(
        self,
        tracker: _StageTracker,
        fallback: Callable[[], GenerationResult],
        error: Exception,
        started: float,
    ) -> GenerationResult:
        tracker.enter(GenerationStage.FALLBACK)
        logger.warning(
            "%s: %s during %s, using placeholder: %s",
            tracker.label,
            type(error).__name__,
            tracker.stages[-2].value if len(tracker.stages) > 1 else "START",
            error,
        )
        tracker.enter(GenerationStage.PERSISTING_FALLBACK)
        try:
            result = fallback()
        except Exception as exc:
            tracker.enter(GenerationStage.FATAL)
            logger.error("%s: placeholder fallback failed: %s", tracker.label, exc, exc_info=True)
            raise GenerationFailedError(f"Both primary and fallback generation failed for {tracker.label}") from exc

        tracker.enter(GenerationStage.DONE)
        metadata = result.metadata.model_copy(update={"processing_time_ms": self._elapsed_ms(started)})
        return result.model_copy(update={"metadata": metadata})

    def _select_video_provider(self) -> Optional[VideoProvider]:
        for provider in self.video_providers:
            if provider.is_configured:
                return provider
        return None

    def _elapsed_ms(self, started: float) -> int:
        return max(0, int((self.clock() - started) * 1000))

    def _timestamp_ms(self) -> int:
        return int(self.clock() * 1000)


__all__ = ["ContentOrchestrator", "GenerationStage", "campaign_items_per_type", "classify_content_type"]
