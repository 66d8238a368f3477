"""Tests for the prompt templates."""

from __future__ import annotations

import pytest

from app.domain.dto import (
    AudioGenerationRequest,
    AudioRequirements,
    BrandContext,
    ContentRequirements,
    ImageGenerationRequest,
    OptimizationOptions,
    TextGenerationRequest,
    VideoGenerationRequest,
    VideoRequirements,
    VisualRequirements,
)
from app.services.prompt_builder import (
    build_audio_prompt,
    build_image_prompt,
    build_optimization_prompt,
    build_text_prompt,
    build_video_prompt,
    build_video_render_prompt,
    optimization_approach,
    text_specification,
)


@pytest.fixture
def brand() -> BrandContext:
    return BrandContext(
        brand_name="Acme Rockets",
        product_description="Reusable hobby rockets",
        industry="Aerospace",
        target_audience="Weekend makers",
        tone_style="Playful",
        primary_color="#ff6600",
    )


def _text_request(brand, content_type="Blog Article", **requirements) -> TextGenerationRequest:
    optimization = requirements.pop("optimization", OptimizationOptions())
    return TextGenerationRequest(
        content_type=content_type,
        brand=brand,
        requirements=ContentRequirements(goal="Drive sign-ups", **requirements),
        optimization=optimization,
    )


class TestTextPrompt:
    def test_contains_brand_context(self, brand):
        prompt = build_text_prompt(_text_request(brand))
        assert "- Brand: Acme Rockets" in prompt
        assert "- Industry: Aerospace" in prompt
        assert "- Content Goal: Drive sign-ups" in prompt
        assert "- Length: medium" in prompt
        assert "OUTPUT REQUIREMENTS:" in prompt

    def test_optional_lines_omitted_when_absent(self, brand):
        prompt = build_text_prompt(_text_request(brand))
        for label in (
            "Brand Values:",
            "Platform:",
            "Seasonal Context:",
            "Key Messages to Include:",
            "Call to Action:",
            "Competitive Landscape:",
            "SEO Keywords:",
            "Additional Context:",
        ):
            assert label not in prompt

    def test_optional_values_included_verbatim(self):
        brand = BrandContext(
            brand_name="Acme",
            product_description="Rockets",
            industry="Aerospace",
            target_audience="Makers",
            tone_style="Bold",
            primary_color="#000",
            brand_values=["Safety", "Fun"],
        )
        request = _text_request(
            brand,
            platform="LinkedIn",
            key_messages=["Reusable", "Affordable"],
            call_to_action="Order today",
            additional_context="Launch week",
            optimization=OptimizationOptions(
                seo_keywords=["hobby rockets", "model rocketry"],
                competitor_analysis="Estes dominates",
                seasonality="Summer",
            ),
        )
        prompt = build_text_prompt(request)

        assert "- Brand Values: Safety, Fun" in prompt
        assert "- Platform: LinkedIn" in prompt
        assert "- Seasonal Context: Summer" in prompt
        assert "- Key Messages to Include: Reusable, Affordable" in prompt
        assert "- Call to Action: Order today" in prompt
        assert "- Competitive Landscape: Estes dominates" in prompt
        assert "- SEO Keywords: hobby rockets, model rocketry" in prompt
        assert "- Additional Context: Launch week" in prompt

    @pytest.mark.parametrize(
        "length,expected",
        [("short", "800-1200"), ("medium", "1200-2000"), ("long", "2000-3000"), (None, "1200-2000")],
    )
    def test_blog_word_targets(self, length, expected):
        assert f"Word count: {expected} words" in text_specification("Blog Article", length)

    @pytest.mark.parametrize(
        "length,expected",
        [("short", "30-60 seconds"), ("medium", "90-180 seconds"), ("long", "3-5 minutes")],
    )
    def test_video_script_durations(self, length, expected):
        assert f"Duration: {expected}" in text_specification("Video Script", length)

    def test_unknown_type_uses_generic_template(self, brand):
        prompt = build_text_prompt(_text_request(brand, content_type="Billboard Slogan"))
        assert "Create compelling billboard slogan content that drives engagement and conversions." in prompt

    def test_deterministic(self, brand):
        request = _text_request(brand, key_messages=["Reusable"])
        assert build_text_prompt(request) == build_text_prompt(request)


class TestImagePrompt:
    def test_palette_and_defaults(self, brand):
        prompt = build_image_prompt(ImageGenerationRequest(content_type="Social Graphic", brand=brand))
        assert "Color Palette: #ff6600 with complementary colors" in prompt
        assert "Platform Optimization: multi-platform" in prompt
        assert "Brand Personality: professional and trustworthy" in prompt
        assert "Visually striking contrast" in prompt
        assert "Culturally appropriate" not in prompt
        assert "Differentiated from" not in prompt

    def test_optional_fields(self):
        brand = BrandContext(
            brand_name="Acme",
            product_description="Rockets",
            industry="Aerospace",
            target_audience="Makers",
            tone_style="Bold",
            primary_color="#000",
            secondary_color="#fff",
            brand_personality="Adventurous",
        )
        request = ImageGenerationRequest(
            content_type="Banner",
            brand=brand,
            visual=VisualRequirements(style="minimalist", platform="Instagram"),
            cultural_context="Japanese market",
            competitor_style="Retro NASA",
            accessibility_needs=True,
        )
        prompt = build_image_prompt(request)

        assert "Color Palette: #000 and #fff" in prompt
        assert "Style: minimalist" in prompt
        assert "Platform Optimization: Instagram" in prompt
        assert "Brand Personality: Adventurous" in prompt
        assert "High contrast for accessibility compliance" in prompt
        assert "Japanese market" in prompt
        assert "Retro NASA" in prompt


class TestVideoPrompt:
    def test_script_scaffold_and_optional_lines(self, brand):
        request = VideoGenerationRequest(
            video_type="Explainer",
            brand=brand,
            video=VideoRequirements(goal="Explain reuse", key_messages=["Lands itself"], call_to_action="Visit acme.test"),
        )
        prompt = build_video_prompt(request)

        assert "Hook (0-3 seconds)" in prompt
        assert "Call to Action (40+ seconds)" in prompt
        assert "- Duration: 60 seconds" in prompt
        assert "- Platform: social media" in prompt
        assert "- Key Messages: Lands itself" in prompt
        assert "- Call to Action: Visit acme.test" in prompt

    def test_key_messages_omitted(self, brand):
        request = VideoGenerationRequest(video_type="Explainer", brand=brand, video=VideoRequirements(goal="Explain"))
        prompt = build_video_prompt(request)
        assert "Key Messages:" not in prompt
        assert "Call to Action:" not in prompt

    def test_render_prompt_truncates_script(self):
        prompt = build_video_render_prompt("Acme", "Teaser", "15 seconds", "x" * 500)
        assert "Content: " + "x" * 200 + "..." in prompt
        assert "x" * 201 not in prompt


class TestAudioPrompt:
    def test_includes_seed_content_and_cta(self, brand):
        request = AudioGenerationRequest(
            audio_type="Radio Spot",
            content="Rockets for everyone",
            brand=brand,
            audio=AudioRequirements(purpose="Awareness", call_to_action="Call now"),
        )
        prompt = build_audio_prompt(request)

        assert "CONTENT: Rockets for everyone" in prompt
        assert "CALL TO ACTION: Call now" in prompt
        assert "Characteristics: clear, professional, engaging" in prompt
        assert "Background music: Subtle, brand-appropriate" in prompt

    def test_cta_omitted(self, brand):
        request = AudioGenerationRequest(
            audio_type="Radio Spot", content="Hi", brand=brand, audio=AudioRequirements(purpose="Awareness")
        )
        assert "CALL TO ACTION" not in build_audio_prompt(request)


class TestOptimizationPrompt:
    def test_approach_by_index(self):
        assert [optimization_approach(i) for i in range(5)] == [
            "conservative",
            "moderate",
            "aggressive",
            "aggressive",
            "aggressive",
        ]

    def test_brief(self, brand):
        prompt = build_optimization_prompt("Old copy", "seo", brand, 1, ["CTR", "dwell time"])
        assert "Optimize the following content for seo:" in prompt
        assert "Original Content: Old copy" in prompt
        assert "Target Metrics: CTR, dwell time" in prompt
        assert "Variation 2 should take a moderate approach" in prompt

    def test_default_metrics(self, brand):
        assert "Target Metrics: General improvement" in build_optimization_prompt("x", "conversion", brand, 0)
