"""
Pydantic models for the product form boundary.

build_submission folds the matrix into the payload the product API takes
(price/stock/SKU per combination, mapped to named option pairs).
reconstruct_state is the inverse, used when editing a saved product.
Both derive identity keys in dimension order.
"""

import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .config import MatrixSettings, get_settings
from .media import prune_media
from .models import (
    MAX_DIMENSIONS,
    ImageSizeChart,
    MatrixState,
    SizeChart,
    TemplateSizeChart,
    VariantRow,
    VariationDimension,
)
from .synthesizer import identity_key, synthesize

logger = logging.getLogger(__name__)


# ============== Submission ==============

class VariantOptionPair(BaseModel):
    """One named option of a variant, e.g. Size: S."""
    name: str
    value: str


class VariantSubmissionItem(BaseModel):
    sku: str
    price: Decimal
    stock: int
    srp: Decimal  # Suggested retail price
    options: list[VariantOptionPair]


class SizeChartPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["template", "image"]
    url: Optional[str] = None
    template_id: Optional[str] = Field(default=None, alias="templateId")


class VariationPayload(BaseModel):
    """The variation part of a product create/update request."""
    model_config = ConfigDict(populate_by_name=True)

    is_variable: bool = Field(alias="isVariable")
    variants: list[VariantSubmissionItem] = []
    variation_images: dict[str, str] = Field(default_factory=dict, alias="variationImages")
    size_chart: Optional[SizeChartPayload] = Field(default=None, alias="sizeChart")

    def to_api(self) -> dict[str, Any]:
        """JSON-ready dict using the API's field names."""
        return self.model_dump(mode="json", by_alias=True)


# ============== Persisted ==============

class PersistedVariant(BaseModel):
    """A variant as stored on a saved product."""
    options: list[VariantOptionPair] = []
    price: Decimal = Decimal("0")
    stock: int = 0
    sku: Optional[str] = None


def size_chart_to_payload(size_chart: Optional[SizeChart]) -> Optional[SizeChartPayload]:
    if isinstance(size_chart, TemplateSizeChart):
        return SizeChartPayload(type="template", template_id=size_chart.template_id)
    if isinstance(size_chart, ImageSizeChart):
        return SizeChartPayload(type="image", url=size_chart.url)
    return None


def size_chart_from_payload(
    payload: Union[SizeChartPayload, dict, None],
) -> Optional[SizeChart]:
    """Turn a stored size chart into a SizeChart. Incomplete entries become None."""
    if payload is None:
        return None
    if isinstance(payload, dict):
        payload = SizeChartPayload.model_validate(payload)

    if payload.type == "template" and payload.template_id:
        return TemplateSizeChart(template_id=payload.template_id)
    if payload.type == "image" and payload.url:
        return ImageSizeChart(url=payload.url)
    return None


def _srp(price: Decimal, settings: MatrixSettings) -> Decimal:
    submission = settings.submission
    return (price * submission.srp_markup).quantize(submission.price_quantum, rounding=ROUND_HALF_UP)


def _submission_sku(sku: str, settings: MatrixSettings) -> str:
    sku = sku.strip()
    if settings.submission.uppercase_sku:
        return sku.upper()
    return sku


def build_submission(
    state: MatrixState,
    settings: Optional[MatrixSettings] = None,
) -> VariationPayload:
    """
    Map a MatrixState into the submission payload.

    One item per row with option pairs in dimension order. SKUs are
    trimmed and uppercased here, not while editing.
    """
    settings = settings or get_settings()

    if not state.dimensions:
        return VariationPayload(
            is_variable=False,
            size_chart=size_chart_to_payload(state.size_chart),
        )

    names = [d.name for d in state.dimensions]
    variants = []
    for row in state.rows:
        options = [VariantOptionPair(name=names[0], value=row.value1)]
        if row.value2 is not None and len(names) > 1:
            options.append(VariantOptionPair(name=names[1], value=row.value2))

        variants.append(VariantSubmissionItem(
            sku=_submission_sku(row.sku, settings),
            price=row.price,
            stock=row.stock,
            srp=_srp(row.price, settings),
            options=options,
        ))

    return VariationPayload(
        is_variable=True,
        variants=variants,
        variation_images=prune_media(state.media, state.dimensions[0].options),
        size_chart=size_chart_to_payload(state.size_chart),
    )


def reconstruct_state(
    variants: list[Union[PersistedVariant, dict]],
    variation_images: Optional[dict[str, str]] = None,
    size_chart: Union[SizeChartPayload, dict, None] = None,
) -> MatrixState:
    """
    Rebuild a MatrixState from a saved product's variants.

    Dimension names come from the first variant's options, in order.
    Option values are collected in order of first appearance. Rows are
    passed through the synthesizer, so they come back in table order and
    missing combinations get default values.

    Raises:
        ValueError: more than MAX_DIMENSIONS option names
    """
    parsed = [
        v if isinstance(v, PersistedVariant) else PersistedVariant.model_validate(v)
        for v in variants
    ]
    chart = size_chart_from_payload(size_chart)

    if not parsed or not parsed[0].options:
        return MatrixState(size_chart=chart)

    names: list[str] = []
    for option in parsed[0].options:
        if option.name not in names:
            names.append(option.name)

    if len(names) > MAX_DIMENSIONS:
        raise ValueError(
            f"Saved product has {len(names)} variation names; at most {MAX_DIMENSIONS} are supported"
        )

    values: dict[str, list[str]] = {name: [] for name in names}
    rows: list[VariantRow] = []

    for variant in parsed:
        by_name = {o.name: o.value for o in variant.options}
        combo = tuple(by_name.get(name) for name in names)
        if any(v is None or v == "" for v in combo):
            logger.warning(f"Skipping saved variant with incomplete options: {by_name}")
            continue

        for name, value in zip(names, combo):
            if value not in values[name]:
                values[name].append(value)

        rows.append(VariantRow(
            identity_key=identity_key(combo),
            value1=combo[0],
            value2=combo[1] if len(combo) > 1 else None,
            price=variant.price,
            stock=variant.stock,
            sku=variant.sku or "",
        ))

    dimensions = tuple(
        VariationDimension(id=uuid.uuid4().hex[:12], name=name, options=tuple(values[name]))
        for name in names
    )
    result = synthesize(dimensions, tuple(rows))

    return MatrixState(
        dimensions=dimensions,
        rows=result.rows,
        media=prune_media(variation_images or {}, dimensions[0].options),
        size_chart=chart,
    )
