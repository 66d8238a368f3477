from __future__ import annotations

import pytest

from app.domain.dto import BrandContext


@pytest.fixture
def brand() -> BrandContext:
    return BrandContext(
        brand_name="Acme Rockets",
        product_description="Reusable hobby rockets",
        industry="Aerospace",
        target_audience="Weekend makers",
        tone_style="Playful",
        primary_color="#ff6600",
        secondary_color="#003366",
    )
