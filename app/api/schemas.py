"""API request/response schemas."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from app.domain.dto import (
    AudioOptions,
    CampaignGenerationRequest,
    ContentGenerationRequest,
    GenerationResult,
    OptimizationRequest,
    OptimizationType,
    VideoOptions,
    VisualOptions,
)


class GenerationResponse(GenerationResult):
    pass


class CampaignResponse(BaseModel):
    results: List[GenerationResult]
    requested: int
    generated: int


class OptimizationResponse(BaseModel):
    optimization_type: OptimizationType
    variations: List[GenerationResult]


class ConfigStatusResponse(BaseModel):
    openai: bool
    storage: bool
    video_providers: List[str] = Field(default_factory=list)
    message: str


class ErrorResponse(BaseModel):
    detail: str
    error_type: str


__all__ = [
    "AudioOptions",
    "CampaignGenerationRequest",
    "CampaignResponse",
    "ConfigStatusResponse",
    "ContentGenerationRequest",
    "ErrorResponse",
    "GenerationResponse",
    "OptimizationRequest",
    "OptimizationResponse",
    "VideoOptions",
    "VisualOptions",
]
