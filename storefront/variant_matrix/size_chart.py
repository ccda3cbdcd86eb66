"""
Size-Chart Policy - When a size chart applies and what it holds.

A size chart is relevant once any dimension is named "Size" (any case).
It is advisory: missing charts produce a message, never a blocked submission.
"""

from dataclasses import replace
from typing import Optional

from .config import MatrixSettings, get_settings
from .models import (
    ImageSizeChart,
    MatrixState,
    SizeChart,
    TemplateSizeChart,
    VariationDimension,
)


def is_size_dimension(name: str, settings: Optional[MatrixSettings] = None) -> bool:
    """True if a dimension name is one of the configured size names."""
    settings = settings or get_settings()
    return name.strip().lower() in settings.size_dimension_names


def is_size_chart_relevant(
    dimensions: tuple[VariationDimension, ...],
    settings: Optional[MatrixSettings] = None,
) -> bool:
    """True if any dimension is a size dimension."""
    return any(is_size_dimension(d.name, settings) for d in dimensions)


def select_template(template_id: str) -> SizeChart:
    """Choose a template. Any previously uploaded image is discarded."""
    if not template_id:
        raise ValueError("Template id is required")
    return TemplateSizeChart(template_id=template_id)


def select_image(url: str) -> SizeChart:
    """Use an uploaded image. Any previously chosen template is discarded."""
    if not url:
        raise ValueError("Image URL is required")
    return ImageSizeChart(url=url)


def set_size_chart(state: MatrixState, size_chart: Optional[SizeChart]) -> MatrixState:
    return replace(state, size_chart=size_chart)


def size_chart_advisories(
    state: MatrixState,
    settings: Optional[MatrixSettings] = None,
) -> list[str]:
    """
    Advisory messages about the size chart.

    Returns an empty list when no size dimension exists or a chart is set.
    """
    if not is_size_chart_relevant(state.dimensions, settings):
        return []
    if state.size_chart is None:
        return ["A size chart is recommended for products with a Size variation"]
    return []
