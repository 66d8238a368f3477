"""Prompt templates for marketing content generation.

Every builder is a pure function of its request: no I/O, no randomness.
Optional fields produce their labelled line only when they carry a value.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from app.domain.dto import (
    AudioGenerationRequest,
    BrandContext,
    ImageGenerationRequest,
    TextGenerationRequest,
    VideoGenerationRequest,
)


# ============================================================================
# System prompts
# ============================================================================

TEXT_SYSTEM_PROMPT = (
    "You are a world-class marketing strategist and copywriter with expertise in conversion "
    "optimization, brand strategy, and consumer psychology. Generate content that exceeds "
    "industry standards and drives measurable business results."
)

VARIATION_SYSTEM_PROMPT = (
    "Create a distinct variation of the content with different angles and approaches while "
    "maintaining the same core objectives."
)

VIDEO_SYSTEM_PROMPT = (
    "You are an expert video producer and marketing strategist. Create comprehensive video "
    "content that maximizes engagement and drives conversions."
)

AUDIO_SYSTEM_PROMPT = (
    "You are a professional audio content creator and voice coach. Generate scripts optimized "
    "for audio delivery and engagement."
)

OPTIMIZATION_APPROACHES = ("conservative", "moderate", "aggressive")


def build_variation_system_prompt() -> str:
    return VARIATION_SYSTEM_PROMPT


# ============================================================================
# Helpers
# ============================================================================


def _optional(label: str, value: Optional[str]) -> Optional[str]:
    return f"{label}{value}" if value else None


def _optional_list(label: str, values: Optional[Sequence[str]]) -> Optional[str]:
    return f"{label}{', '.join(values)}" if values else None


def _join(lines: Iterable[Optional[str]]) -> str:
    return "\n".join(line for line in lines if line is not None)


def _color_palette(brand: BrandContext) -> str:
    if brand.secondary_color:
        return f"{brand.primary_color} and {brand.secondary_color}"
    return f"{brand.primary_color} with complementary colors"


# ============================================================================
# Text
# ============================================================================

_BLOG_WORDS = {"short": "800-1200", "medium": "1200-2000", "long": "2000-3000"}
_SCRIPT_DURATION = {"short": "30-60 seconds", "medium": "90-180 seconds", "long": "3-5 minutes"}

_TEXT_SPECIFICATIONS = {
    "Blog Article": """
Create a comprehensive blog article that:
- Opens with a compelling hook that addresses a specific problem
- Provides actionable insights and value
- Includes data-driven points and industry expertise
- Uses subheadings for scanability
- Incorporates relevant keywords naturally
- Ends with a strong call-to-action
- Word count: {blog_words} words""",
    "Social Media Post": """
Create a high-engagement social media post that:
- Starts with a pattern interrupt or bold statement
- Uses platform-specific formatting (hashtags, mentions, emojis where appropriate)
- Includes a clear value proposition
- Encourages engagement (likes, shares, comments)
- Has a compelling visual description if applicable
- Optimal character count for the platform""",
    "Email Campaign": """
Create a conversion-optimized email that:
- Subject line with 30-50 characters that maximizes open rates
- Personalized opening that builds connection
- Clear value proposition in the first paragraph
- Social proof and credibility indicators
- Multiple compelling CTAs throughout
- Mobile-optimized formatting
- P.S. line that reinforces the main offer""",
    "Ad Copy": """
Create high-converting ad copy that:
- Headline that stops the scroll and captures attention
- Focuses on benefits over features
- Creates urgency or scarcity when appropriate
- Addresses objections preemptively
- Multiple variations for A/B testing
- Complies with platform advertising policies
- Clear, prominent call-to-action""",
    "Product Description": """
Create a compelling product description that:
- Leads with the primary benefit
- Addresses target customer pain points
- Uses sensory language and emotional triggers
- Includes technical specifications naturally
- Anticipates and handles objections
- Builds desire and urgency
- Ends with confidence-boosting guarantee or offer""",
    "Landing Page Copy": """
Create high-converting landing page copy with:
- Attention-grabbing headline and subheadline
- Clear value proposition above the fold
- Benefit-focused bullet points
- Social proof and testimonials
- Risk reversal and guarantees
- Multiple strategic CTAs
- Objection handling throughout
- Urgency and scarcity elements""",
    "Video Script": """
Create an engaging video script that:
- Hook within the first 3 seconds
- Clear narrative arc with problem/solution
- Conversational, natural tone for voiceover
- Visual cue descriptions for production
- Emotional peaks and valleys for engagement
- Strong call-to-action at the end
- Duration: {script_duration}""",
    "Press Release": """
Create a newsworthy press release that:
- Compelling headline with news angle
- Strong lead paragraph with who, what, when, where, why
- Quotable executives and industry experts
- Industry context and significance
- Company boilerplate and contact information
- SEO-optimized for media pickup""",
    "Case Study": """
Create a detailed case study that:
- Compelling client success story
- Clear problem/solution framework
- Quantifiable results and metrics
- Process and methodology details
- Client testimonials and quotes
- Actionable insights for readers
- Strong conversion-focused conclusion""",
}

_GENERIC_TEXT_SPECIFICATION = """
Create compelling {content_type} content that drives engagement and conversions."""

_OPTIMIZATION_CRITERIA = """OPTIMIZATION CRITERIA:
1. Psychological triggers: Use proven persuasion principles (social proof, scarcity, authority, reciprocity)
2. Emotional resonance: Connect with target audience's pain points, desires, and aspirations
3. Clarity and focus: Every word should serve the conversion goal
4. Platform optimization: Tailor format and style for the specific platform
5. SEO considerations: Include relevant keywords naturally
6. Brand consistency: Maintain voice, tone, and messaging alignment
7. Action-oriented: Drive specific behavioral outcomes"""

_TEXT_OUTPUT_REQUIREMENTS = """OUTPUT REQUIREMENTS:
- Provide 2-3 variations for testing
- Include performance optimization notes
- Suggest complementary content ideas
- Provide A/B testing recommendations

Generate world-class content that exceeds industry benchmarks and drives measurable business results."""


def text_specification(content_type: str, content_length: Optional[str] = None) -> str:
    """Content-type block of the text prompt; unknown types get the generic template."""
    length = content_length or "medium"
    template = _TEXT_SPECIFICATIONS.get(content_type)
    if template is None:
        return _GENERIC_TEXT_SPECIFICATION.format(content_type=content_type.lower())
    return template.format(blog_words=_BLOG_WORDS[length], script_duration=_SCRIPT_DURATION[length])


def build_text_prompt(request: TextGenerationRequest) -> str:
    brand = request.brand
    requirements = request.requirements
    optimization = request.optimization

    brand_section = _join([
        "BRAND CONTEXT:",
        f"- Brand: {brand.brand_name}",
        f"- Industry: {brand.industry}",
        f"- Product/Service: {brand.product_description}",
        f"- Target Audience: {brand.target_audience}",
        f"- Brand Tone: {brand.tone_style}",
        f"- Content Goal: {requirements.goal}",
        _optional_list("- Brand Values: ", brand.brand_values),
        _optional("- Platform: ", requirements.platform),
        _optional("- Seasonal Context: ", optimization.seasonality),
    ])
    requirements_section = _join([
        "CONTENT REQUIREMENTS:",
        f"- Type: {request.content_type}",
        f"- Length: {requirements.content_length or 'medium'}",
        _optional_list("- Key Messages to Include: ", requirements.key_messages),
        _optional("- Call to Action: ", requirements.call_to_action),
        _optional("- Competitive Landscape: ", optimization.competitor_analysis),
        _optional_list("- SEO Keywords: ", optimization.seo_keywords),
        _optional("- Additional Context: ", requirements.additional_context),
    ])

    return (
        "You are a world-class marketing strategist and copywriter with 20+ years of experience "
        "creating high-converting content for Fortune 500 companies.\n\n"
        f"{brand_section}\n\n"
        f"{requirements_section}\n\n"
        f"{_OPTIMIZATION_CRITERIA}\n\n"
        "CONTENT SPECIFICATIONS:"
        f"{text_specification(request.content_type, requirements.content_length)}\n\n"
        f"{_TEXT_OUTPUT_REQUIREMENTS}"
    )


# ============================================================================
# Image
# ============================================================================


def build_image_prompt(request: ImageGenerationRequest) -> str:
    brand = request.brand
    visual = request.visual
    contrast = (
        "High contrast for accessibility compliance"
        if request.accessibility_needs
        else "Visually striking contrast"
    )

    psychology = _join([
        "MARKETING PSYCHOLOGY:",
        "- Visual hierarchy that guides the eye to key elements",
        f"- Emotional triggers that resonate with {brand.target_audience}",
        "- Industry-appropriate sophistication level",
        "- Conversion-optimized visual flow",
        _optional("- Differentiated from typical style of: ", request.competitor_style),
        _optional("- Culturally appropriate for ", request.cultural_context),
    ])

    return f"""Create a professional, high-impact marketing visual for {brand.brand_name} with these specifications:

VISUAL CONCEPT:
- Content Type: {request.content_type}
- Product/Service: {brand.product_description}
- Industry Context: {brand.industry}
- Target Audience: {brand.target_audience}
- Brand Personality: {brand.brand_personality or 'professional and trustworthy'}

DESIGN SPECIFICATIONS:
- Style: {visual.style} (photorealistic, minimalist, abstract, illustration, etc.)
- Mood: {visual.mood} (energetic, calm, luxurious, friendly, authoritative, etc.)
- Composition: {visual.composition} (centered, rule of thirds, dynamic, symmetrical, etc.)
- Color Palette: {_color_palette(brand)}
- Platform Optimization: {visual.platform or 'multi-platform'}

TECHNICAL REQUIREMENTS:
- Ultra-high quality, professional grade
- Sharp focus and perfect lighting
- Brand-appropriate typography if text is included
- Scalable design that works at multiple sizes
- {contrast}

{psychology}

OUTPUT STYLE:
Create a visually stunning, professionally crafted image that immediately communicates quality, trustworthiness, and value. The image should stop the scroll, capture attention, and drive engagement while perfectly representing the {brand.brand_name} brand identity.

Avoid: Generic stock photo appearance, cluttered compositions, poor contrast, amateur lighting, copyright-infringing elements."""


# ============================================================================
# Video
# ============================================================================


def build_video_prompt(request: VideoGenerationRequest) -> str:
    brand = request.brand
    video = request.video

    framework = _join([
        "CONTENT FRAMEWORK:",
        f"- Product/Service: {brand.product_description}",
        _optional_list("- Key Messages: ", video.key_messages),
        _optional("- Call to Action: ", video.call_to_action),
        _optional("- Visual Style: ", video.visual_style),
        _optional("- Background Music: ", video.background_music),
    ])

    return f"""Create a high-converting video script and production guide for {brand.brand_name}:

VIDEO SPECIFICATIONS:
- Type: {request.video_type}
- Duration: {video.duration}
- Platform: {video.platform}
- Goal: {video.goal}
- Target Audience: {brand.target_audience}
- Tone: {brand.tone_style}
- Brand Personality: {brand.brand_personality or 'professional and engaging'}

{framework}

SCRIPT REQUIREMENTS:
1. Hook (0-3 seconds): Immediate attention grabber
2. Problem/Pain Point (3-10 seconds): Relatable audience challenge
3. Solution Introduction (10-20 seconds): Product/service presentation
4. Benefits/Social Proof (20-40 seconds): Value demonstration
5. Call to Action (40+ seconds): Clear next steps

PRODUCTION NOTES:
- Shot list with specific camera angles
- Lighting requirements for brand mood
- Music/audio recommendations
- Text overlay suggestions
- Color grading notes to match brand palette
- Platform-specific formatting requirements

ENGAGEMENT OPTIMIZATION:
- Visual pattern interrupts every 3-5 seconds
- Emotional peaks and valleys
- Clear visual hierarchy
- Mobile-first composition
- Accessibility considerations (captions, high contrast)

OUTPUT DELIVERABLES:
1. Complete shot-by-shot script
2. Production timeline and requirements
3. Post-production guidelines
4. Platform optimization notes
5. Performance metrics to track

Create a video concept that maximizes engagement, drives conversions, and builds lasting brand affinity."""


def build_video_render_prompt(brand_name: str, video_type: str, duration: str, script: str) -> str:
    """Short text-to-video prompt for Pika / Runway."""
    return f"""Professional marketing video for {brand_name}.

Video Type: {video_type}
Style: Modern, clean, professional
Duration: {duration}

Content: {script[:200]}...

Visual Requirements:
- High quality, professional appearance
- Modern typography and animations
- Brand-appropriate color scheme
- Smooth transitions
- Engaging visual elements
- Call-to-action at the end"""


# ============================================================================
# Audio
# ============================================================================


def build_audio_prompt(request: AudioGenerationRequest) -> str:
    brand = request.brand
    audio = request.audio
    call_to_action = f"\nCALL TO ACTION: {audio.call_to_action}" if audio.call_to_action else ""

    return f"""Create professional audio content for {brand.brand_name}:

AUDIO SPECIFICATIONS:
- Type: {request.audio_type}
- Duration: {audio.duration}
- Target Audience: {brand.target_audience}
- Tone: {brand.tone_style}
- Purpose: {audio.purpose}

VOICE REQUIREMENTS:
- Characteristics: {audio.voice_characteristics or 'clear, professional, engaging'}
- Pacing: Appropriate for audience and platform
- Emphasis: Strategic highlighting of key points
- Emotion: Matches brand personality and content goal

SCRIPT STRUCTURE:
- Opening hook that captures attention
- Clear, logical content flow
- Strategic pauses for emphasis
- Natural, conversational delivery
- Strong closing with clear next steps

CONTENT: {request.content}{call_to_action}

PRODUCTION NOTES:
- Audio quality: Professional studio standards
- Background music: {audio.background_music or 'Subtle, brand-appropriate'}
- Sound effects: Minimal, purposeful
- Post-production: Professional editing and mastering

ENGAGEMENT ELEMENTS:
- Voice modulation to maintain interest
- Strategic repetition of key points
- Clear pronunciation guide for brand/product names
- Accessibility considerations

Generate a script that creates emotional connection, builds trust, and drives action through expertly crafted audio storytelling."""


# ============================================================================
# Optimization
# ============================================================================


def optimization_approach(variation_index: int) -> str:
    """conservative, moderate, then aggressive for every later variation."""
    return OPTIMIZATION_APPROACHES[min(variation_index, len(OPTIMIZATION_APPROACHES) - 1)]


def build_optimization_prompt(
    original_content: str,
    optimization_type: str,
    brand: BrandContext,
    variation_index: int,
    target_metrics: Optional[List[str]] = None,
) -> str:
    metrics = ", ".join(target_metrics) if target_metrics else "General improvement"
    return f"""Optimize the following content for {optimization_type}:

Original Content: {original_content}

Optimization Goals:
- Type: {optimization_type}
- Target Metrics: {metrics}
- Brand: {brand.brand_name}
- Audience: {brand.target_audience}

Create a variation that significantly improves {optimization_type} while maintaining brand voice and core messaging.
Variation {variation_index + 1} should take a {optimization_approach(variation_index)} approach to optimization."""


__all__ = [
    "AUDIO_SYSTEM_PROMPT",
    "TEXT_SYSTEM_PROMPT",
    "VARIATION_SYSTEM_PROMPT",
    "VIDEO_SYSTEM_PROMPT",
    "build_audio_prompt",
    "build_image_prompt",
    "build_optimization_prompt",
    "build_text_prompt",
    "build_variation_system_prompt",
    "build_video_prompt",
    "build_video_render_prompt",
    "optimization_approach",
    "text_specification",
]
