"""
Dimension Store - Add, rename and remove dimensions and their options.

Each operation takes a MatrixState and returns a new one with rows
resynthesized. Nothing is mutated in place.
"""

import logging
import uuid
from dataclasses import replace
from typing import Optional

from .config import MatrixSettings, get_settings
from .errors import DimensionIndexError, OptionRejectedError
from .media import unbind_image
from .models import MAX_DIMENSIONS, MatrixState, VariationDimension
from .synthesizer import synthesize

logger = logging.getLogger(__name__)


def _new_dimension_id() -> str:
    return uuid.uuid4().hex[:12]


def _check_index(state: MatrixState, index: int) -> VariationDimension:
    if not 0 <= index < len(state.dimensions):
        raise DimensionIndexError(
            f"No dimension at index {index} (have {len(state.dimensions)})"
        )
    return state.dimensions[index]


def _with_dimensions(state: MatrixState, dimensions: tuple[VariationDimension, ...]) -> MatrixState:
    """Swap in new dimensions and resynthesize rows against the current ones."""
    result = synthesize(dimensions, state.rows)
    return replace(state, dimensions=dimensions, rows=result.rows)


def add_dimension(
    state: MatrixState,
    settings: Optional[MatrixSettings] = None,
    dimension_id: Optional[str] = None,
) -> MatrixState:
    """
    Append a dimension with a default name.

    No-op when MAX_DIMENSIONS already exist. The new dimension has no
    options, so the row set becomes empty until one is added.
    """
    if len(state.dimensions) >= MAX_DIMENSIONS:
        logger.debug(f"Ignoring add_dimension: already at {MAX_DIMENSIONS} dimensions")
        return state

    settings = settings or get_settings()
    dimension = VariationDimension(
        id=dimension_id or _new_dimension_id(),
        name=settings.default_dimension_name(len(state.dimensions)),
    )
    return _with_dimensions(state, state.dimensions + (dimension,))


def remove_dimension(state: MatrixState, index: int) -> MatrixState:
    """
    Delete a dimension and reset all row data and images.

    A two-value key has no well-defined one-value projection, so the
    remaining dimensions are resynthesized from scratch.
    """
    removed = _check_index(state, index)
    dimensions = state.dimensions[:index] + state.dimensions[index + 1:]

    discarded = sum(1 for row in state.rows if row.has_data())
    if discarded or state.media:
        logger.info(
            f"Removed dimension '{removed.name}': discarded {discarded} edited rows "
            f"and {len(state.media)} images"
        )

    result = synthesize(dimensions, ())
    return replace(state, dimensions=dimensions, rows=result.rows, media={})


def rename_dimension(state: MatrixState, index: int, name: str) -> MatrixState:
    """Change a dimension's display name. Rows keep their data."""
    dimension = _check_index(state, index)
    dimensions = list(state.dimensions)
    dimensions[index] = replace(dimension, name=name)
    return _with_dimensions(state, tuple(dimensions))


def add_option(state: MatrixState, dim_index: int, value: str) -> MatrixState:
    """
    Append an option value to a dimension.

    Raises:
        OptionRejectedError: value is blank or already present
    """
    dimension = _check_index(state, dim_index)
    value = (value or "").strip()

    if not value:
        logger.warning(f"Rejected blank option for {dimension.name}")
        raise OptionRejectedError(f"{dimension.name} option cannot be empty")
    if value in dimension.options:
        logger.warning(f"Rejected duplicate option {value!r} for {dimension.name}")
        raise OptionRejectedError(f"Option '{value}' already exists in {dimension.name}")

    dimensions = list(state.dimensions)
    dimensions[dim_index] = replace(dimension, options=dimension.options + (value,))
    return _with_dimensions(state, tuple(dimensions))


def remove_option(state: MatrixState, dim_index: int, value: str) -> MatrixState:
    """
    Remove an option value. Removing from dimension 0 also drops its image.

    Removing a value that is not present leaves the state unchanged.
    """
    dimension = _check_index(state, dim_index)
    if value not in dimension.options:
        return state

    dimensions = list(state.dimensions)
    dimensions[dim_index] = replace(
        dimension, options=tuple(o for o in dimension.options if o != value)
    )

    if dim_index == 0:
        state = unbind_image(state, value)

    return _with_dimensions(state, tuple(dimensions))
