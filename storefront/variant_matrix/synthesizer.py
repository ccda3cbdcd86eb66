"""
Matrix Synthesizer - Derive sellable rows from variation dimensions.

Rows are the ordered Cartesian product of the dimension options
(dimension 0 outer, dimension 1 inner). Each row is matched to the
previous row set by identity key:

| Key in previous rows? | Result                               |
|-----------------------|--------------------------------------|
| yes                   | price / stock / sku reused verbatim  |
| no                    | price 0, stock 0, sku ""             |

Keys are built from option values only, so renaming a dimension keeps
every row, while changing the number of dimensions changes every key.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from itertools import product
from typing import Iterable

from .models import DimensionShape, VariantRow, VariationDimension, shape_of

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "-"
KEY_ESCAPE = "\\"


@dataclass(frozen=True)
class SynthesisResult:
    """New row set plus whether it differs from the previous one."""
    rows: tuple[VariantRow, ...]
    changed: bool


def _escape(value: str) -> str:
    return value.replace(KEY_ESCAPE, KEY_ESCAPE * 2).replace(KEY_SEPARATOR, KEY_ESCAPE + KEY_SEPARATOR)


def identity_key(values: Iterable[str]) -> str:
    """
    Build the identity key for an option tuple.

    Order-sensitive: ("Red", "S") -> "Red-S", ("Red",) -> "Red".
    Separators inside values are escaped so ("A-B", "C") and ("A", "B-C")
    never collide.
    """
    parts = [_escape(v) for v in values]
    if not parts:
        raise ValueError("Identity key needs at least one option value")
    return KEY_SEPARATOR.join(parts)


def index_rows(rows: Iterable[VariantRow]) -> dict[str, VariantRow]:
    """Map identity key -> row (last write wins for duplicates)."""
    return {row.identity_key: row for row in rows}


def expected_row_count(dimensions: tuple[VariationDimension, ...]) -> int:
    """Number of rows the dimensions produce. Zero if any dimension is empty."""
    if not dimensions:
        return 0
    count = 1
    for dimension in dimensions:
        count *= len(dimension.options)
    return count


def combinations(dimensions: tuple[VariationDimension, ...]) -> list[tuple[str, ...]]:
    """
    Ordered option tuples for the dimensions.

    Dimension-0-major: every dimension-1 option for a given dimension-0
    value is contiguous.
    """
    shape = shape_of(dimensions)
    if shape == DimensionShape.ZERO:
        return []
    if any(not d.options for d in dimensions):
        return []
    if shape == DimensionShape.ONE:
        return [(value,) for value in dimensions[0].options]
    return list(product(dimensions[0].options, dimensions[1].options))


def _build_row(values: tuple[str, ...], previous: dict[str, VariantRow]) -> VariantRow:
    key = identity_key(values)
    value1 = values[0]
    value2 = values[1] if len(values) > 1 else None

    existing = previous.get(key)
    if existing is not None and existing.values == values:
        return VariantRow(
            identity_key=key,
            value1=value1,
            value2=value2,
            price=existing.price,
            stock=existing.stock,
            sku=existing.sku,
        )

    return VariantRow(
        identity_key=key,
        value1=value1,
        value2=value2,
        price=Decimal("0"),
        stock=0,
        sku="",
    )


def synthesize(
    dimensions: tuple[VariationDimension, ...],
    previous_rows: tuple[VariantRow, ...] = (),
) -> SynthesisResult:
    """
    Compute the row set for the dimensions, reusing previous row data by key.

    Args:
        dimensions: Current dimensions (0-2)
        previous_rows: Rows from before the edit

    Returns:
        SynthesisResult with the new rows and a changed flag
    """
    previous_rows = tuple(previous_rows)
    previous = index_rows(previous_rows)

    rows = tuple(_build_row(values, previous) for values in combinations(dimensions))
    changed = rows != previous_rows

    if changed:
        reused = sum(1 for row in rows if row.identity_key in previous)
        logger.debug(
            f"Resynthesized {len(rows)} of {expected_row_count(dimensions)} expected rows "
            f"({reused} reused, {len(rows) - reused} new, {len(previous_rows)} previous)"
        )

    return SynthesisResult(rows=rows, changed=changed)
