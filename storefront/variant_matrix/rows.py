"""
Row Editor - Per-row edits, bulk apply, and row-span grouping.

Numeric input that does not parse keeps the previous value; a NaN never
reaches the row set.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .models import DimensionShape, MatrixState, RowField, VariantRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowGroup:
    """Rows sharing a dimension-0 value, rendered as one row-span."""
    value1: str
    rows: tuple[VariantRow, ...]
    start_index: int

    @property
    def span(self) -> int:
        return len(self.rows)


def parse_price(raw: Any) -> Optional[Decimal]:
    """Parse a price; None if it is not a finite number."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def parse_stock(raw: Any) -> Optional[int]:
    """
    Parse a stock count; None unless it is a whole number.

    Fractional input such as "1.5" is rejected rather than truncated, so the
    row keeps its previous stock instead of silently storing 1.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    value = parse_price(raw)
    if value is None or value != value.to_integral_value():
        return None
    return int(value)


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _apply(row: VariantRow, field: RowField, raw: Any) -> VariantRow:
    if field == RowField.PRICE:
        price = parse_price(raw)
        if price is None:
            logger.warning(f"Ignoring non-numeric price {raw!r} for {row.identity_key}")
            return row
        return replace(row, price=price)

    if field == RowField.STOCK:
        stock = parse_stock(raw)
        if stock is None:
            logger.warning(f"Ignoring non-integer stock {raw!r} for {row.identity_key}")
            return row
        return replace(row, stock=stock)

    # SKU is kept as typed; it is uppercased at submission time
    return replace(row, sku="" if raw is None else str(raw))


def set_field(state: MatrixState, row_index: int, field: RowField | str, raw_value: Any) -> MatrixState:
    """
    Set one field on one row.

    Args:
        state: Current matrix
        row_index: Position in state.rows
        field: "price", "stock" or "sku"
        raw_value: Value as entered

    Returns:
        New MatrixState (the same object if the input did not parse)
    """
    field = RowField(field)
    if not 0 <= row_index < len(state.rows):
        raise IndexError(f"No row at index {row_index} (have {len(state.rows)})")

    row = state.rows[row_index]
    updated = _apply(row, field, raw_value)
    if updated == row:
        return state

    rows = list(state.rows)
    rows[row_index] = updated
    return replace(state, rows=tuple(rows))


def bulk_apply(
    state: MatrixState,
    price: Any = None,
    stock: Any = None,
    sku: Any = None,
) -> MatrixState:
    """
    Overwrite price, stock and/or SKU on every row.

    Blank arguments are skipped, not treated as zero or empty.
    """
    updates = [
        (RowField.PRICE, price),
        (RowField.STOCK, stock),
        (RowField.SKU, sku),
    ]
    updates = [(f, raw) for f, raw in updates if not _is_blank(raw)]
    if not updates or not state.rows:
        return state

    rows = []
    for row in state.rows:
        for field, raw in updates:
            row = _apply(row, field, raw)
        rows.append(row)

    rows = tuple(rows)
    if rows == state.rows:
        return state
    return replace(state, rows=rows)


def row_groups(state: MatrixState) -> list[RowGroup]:
    """
    Group rows by dimension-0 value for row-span rendering.

    Relies on rows being dimension-0-major. With one dimension every group
    spans a single row.
    """
    if state.shape == DimensionShape.ZERO or not state.rows:
        return []

    groups: list[RowGroup] = []
    current: list[VariantRow] = []
    start = 0

    for index, row in enumerate(state.rows):
        if current and row.value1 != current[0].value1:
            groups.append(RowGroup(value1=current[0].value1, rows=tuple(current), start_index=start))
            current = []
            start = index
        current.append(row)

    if current:
        groups.append(RowGroup(value1=current[0].value1, rows=tuple(current), start_index=start))

    return groups


def has_row_data(state: MatrixState) -> bool:
    """True if any row carries non-default price, stock or SKU."""
    return any(row.has_data() for row in state.rows)
