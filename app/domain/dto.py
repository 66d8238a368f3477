"""Domain data transfer objects shared by the generation core and the API layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ContentLength = Literal["short", "medium", "long"]
ImageDimensions = Literal["1024x1024", "1792x1024", "1024x1792"]
VoiceName = Literal["alloy", "echo", "fable", "onyx", "nova", "shimmer"]


class ContentKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class JobStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"
    ERROR = "error"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Inputs -------------------------------------------------------------------


class BrandContext(_FrozenModel):
    """Descriptive brand attributes used to personalise every prompt."""

    brand_name: str = Field(min_length=1)
    product_description: str
    industry: str
    target_audience: str
    tone_style: str
    primary_color: str
    secondary_color: Optional[str] = None
    brand_values: List[str] = Field(default_factory=list)
    brand_personality: Optional[str] = None


class ContentRequirements(_FrozenModel):
    goal: str
    platform: Optional[str] = None
    content_length: Optional[ContentLength] = None
    key_messages: List[str] = Field(default_factory=list)
    call_to_action: Optional[str] = None
    additional_context: Optional[str] = None


class OptimizationOptions(_FrozenModel):
    seo_keywords: List[str] = Field(default_factory=list)
    competitor_analysis: Optional[str] = None
    seasonality: Optional[str] = None
    ab_test_variations: Optional[int] = Field(default=None, ge=1, le=5)
    accessibility_needs: bool = False


class VisualRequirements(_FrozenModel):
    style: str = "professional"
    mood: str = "engaging"
    composition: str = "dynamic"
    platform: Optional[str] = None
    dimensions: ImageDimensions = "1024x1024"


class VideoRequirements(_FrozenModel):
    goal: str
    duration: str = "60 seconds"
    platform: str = "social media"
    key_messages: List[str] = Field(default_factory=list)
    call_to_action: Optional[str] = None
    style: Optional[str] = None  # presenter / render style
    voice_id: Optional[str] = None
    voice_over: Optional[bool] = None
    background_music: Optional[str] = None
    visual_style: Optional[str] = None
    render_video: bool = True


class AudioRequirements(_FrozenModel):
    purpose: str
    duration: str = "30 seconds"
    voice_characteristics: Optional[str] = None
    background_music: Optional[str] = None
    call_to_action: Optional[str] = None
    voice: VoiceName = "nova"
    speed: float = Field(default=1.0, ge=0.25, le=4.0)


class TextGenerationRequest(_FrozenModel):
    content_type: str
    brand: BrandContext
    requirements: ContentRequirements
    optimization: OptimizationOptions = Field(default_factory=OptimizationOptions)


class ImageGenerationRequest(_FrozenModel):
    content_type: str
    brand: BrandContext
    visual: VisualRequirements = Field(default_factory=VisualRequirements)
    cultural_context: Optional[str] = None
    competitor_style: Optional[str] = None
    accessibility_needs: bool = False


class VideoGenerationRequest(_FrozenModel):
    video_type: str
    brand: BrandContext
    video: VideoRequirements


class AudioGenerationRequest(_FrozenModel):
    audio_type: str
    content: str
    brand: BrandContext
    audio: AudioRequirements


# --- Service requests --------------------------------------------------------

OptimizationType = Literal["seo", "conversion", "engagement", "accessibility"]


class VisualOptions(BaseModel):
    style: Optional[str] = None
    mood: Optional[str] = None
    composition: Optional[str] = None
    dimensions: Optional[ImageDimensions] = None


class AudioOptions(BaseModel):
    duration: Optional[str] = None
    voice: Optional[VoiceName] = None
    speed: Optional[float] = Field(default=None, ge=0.25, le=4.0)
    purpose: Optional[str] = None


class VideoOptions(BaseModel):
    duration: Optional[str] = None
    style: Optional[str] = None
    voice_id: Optional[str] = None
    render_video: bool = True


class ContentGenerationRequest(BaseModel):
    """One piece of content. ``content_type`` picks the modality; ``content_subtype`` the template."""

    brand: BrandContext
    content_type: str = Field(min_length=1)
    content_subtype: Optional[str] = None
    requirements: ContentRequirements
    visual_requirements: Optional[VisualOptions] = None
    audio_requirements: Optional[AudioOptions] = None
    video_requirements: Optional[VideoOptions] = None
    optimization: Optional[OptimizationOptions] = None

    @property
    def template_type(self) -> str:
        return self.content_subtype or self.content_type


class CampaignGenerationRequest(BaseModel):
    """A campaign spread over platforms and content types.

    ``content_volume`` is the total number of items wanted across all platforms;
    when omitted every platform gets one item of each content type.
    """

    brand: BrandContext
    name: str = Field(min_length=1)
    description: Optional[str] = None
    campaign_goal: str
    content_types: List[str] = Field(min_length=1)
    platforms: List[str] = Field(min_length=1)
    content_volume: Optional[int] = Field(default=None, ge=1)
    duration: Optional[str] = None
    seo_focus: bool = False
    ab_testing: bool = False
    accessibility: bool = False


class OptimizationRequest(BaseModel):
    """Produce optimised variations of an existing piece of content."""

    brand: BrandContext
    content_type: str
    original_content: str = Field(min_length=1)
    optimization_type: OptimizationType
    target_metrics: List[str] = Field(default_factory=list)
    test_variations: int = Field(default=2, ge=1, le=5)


# --- Outputs ------------------------------------------------------------------


class PerformanceMetrics(_FrozenModel):
    readability_score: Optional[float] = None
    sentiment_score: Optional[float] = None
    seo_score: Optional[float] = None


class GenerationMetadata(_FrozenModel):
    processing_time_ms: int = Field(ge=0)
    provider: str
    is_placeholder: bool = False
    tokens_used: Optional[int] = None
    variations: List[str] = Field(default_factory=list)
    optimization_notes: List[str] = Field(default_factory=list)
    performance_metrics: Optional[PerformanceMetrics] = None
    source_url: Optional[str] = None
    duration_seconds: Optional[float] = None


class GenerationResult(_FrozenModel):
    """Outcome of one generation call, from either the primary or the fallback path."""

    content: str = Field(min_length=1)
    metadata: GenerationMetadata
    storage_url: Optional[str] = None
    file_name: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.metadata.is_placeholder


# --- Provider-side records ----------------------------------------------------


@dataclass(frozen=True)
class ProviderJob:
    """A remote long-running job, tracked only for the duration of one request."""

    job_id: str
    status: JobStatus = JobStatus.PENDING
    result_url: Optional[str] = None
    detail: Optional[str] = None


@dataclass(frozen=True)
class ProviderOutput:
    """Normalised adapter output: generated text or bytes, plus where the provider hosted it."""

    content: Optional[str] = None
    binary: Optional[bytes] = None
    source_url: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class ChatCompletion:
    content: str
    tokens_used: Optional[int] = None
    model: Optional[str] = None


@dataclass(frozen=True)
class VideoRenderJob:
    """Everything a video provider needs to render one clip."""

    script: str
    prompt: str
    duration_seconds: int
    brand_name: str
    video_type: str
    style: Optional[str] = None
    voice_id: Optional[str] = None


__all__ = [
    "AudioGenerationRequest",
    "AudioOptions",
    "AudioRequirements",
    "BrandContext",
    "CampaignGenerationRequest",
    "ChatCompletion",
    "ContentGenerationRequest",
    "ContentKind",
    "ContentLength",
    "ContentRequirements",
    "GenerationMetadata",
    "GenerationResult",
    "ImageDimensions",
    "ImageGenerationRequest",
    "JobStatus",
    "OptimizationOptions",
    "OptimizationRequest",
    "OptimizationType",
    "PerformanceMetrics",
    "ProviderJob",
    "ProviderOutput",
    "TextGenerationRequest",
    "VideoGenerationRequest",
    "VideoOptions",
    "VideoRenderJob",
    "VideoRequirements",
    "VisualOptions",
    "VisualRequirements",
    "VoiceName",
]
