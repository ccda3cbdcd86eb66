"""
Data models for the variant matrix.

All structured data uses frozen dataclasses so every edit produces a new
value. Money values use Decimal for precision.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union


# Hard cap on variation dimensions per product
MAX_DIMENSIONS = 2


class DimensionShape(Enum):
    """
    How many dimensions a product currently has.

    Key derivation, table rendering and row-span grouping all branch on this
    instead of probing for a missing second dimension.
    """
    ZERO = 0
    ONE = 1
    TWO = 2


class RowField(str, Enum):
    """Editable columns of a variant row."""
    PRICE = "price"
    STOCK = "stock"
    SKU = "sku"


@dataclass(frozen=True)
class VariationDimension:
    """
    One axis of variation (e.g. "Color") and its ordered option values.

    The name is display text only; rows are keyed on option values.
    """
    id: str
    name: str
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class VariantRow:
    """
    A single sellable combination of option values.

    value2 is None when the product has only one dimension.
    """
    identity_key: str
    value1: str
    value2: Optional[str] = None
    price: Decimal = Decimal("0")
    stock: int = 0
    sku: str = ""

    @property
    def values(self) -> tuple[str, ...]:
        """Option values in dimension order."""
        if self.value2 is None:
            return (self.value1,)
        return (self.value1, self.value2)

    def has_data(self) -> bool:
        """True if any field differs from the defaults."""
        return self.price != 0 or self.stock != 0 or self.sku != ""


@dataclass(frozen=True)
class TemplateSizeChart:
    """Size chart chosen from a predefined template."""
    template_id: str

    @property
    def kind(self) -> str:
        return "template"


@dataclass(frozen=True)
class ImageSizeChart:
    """Size chart supplied as an uploaded image."""
    url: str

    @property
    def kind(self) -> str:
        return "image"


SizeChart = Union[TemplateSizeChart, ImageSizeChart]


@dataclass(frozen=True)
class MatrixState:
    """
    Everything the product form owns about variations.

    Never mutated in place: operations return a new MatrixState via
    dataclasses.replace. media is a read-only view over a private copy of
    whatever mapping was passed in.
    """
    dimensions: tuple[VariationDimension, ...] = ()
    rows: tuple[VariantRow, ...] = ()
    media: Mapping[str, str] = field(default_factory=dict)
    size_chart: Optional[SizeChart] = None

    def __post_init__(self):
        object.__setattr__(self, "media", MappingProxyType(dict(self.media)))

    @property
    def shape(self) -> DimensionShape:
        return shape_of(self.dimensions)


def shape_of(dimensions: tuple[VariationDimension, ...]) -> DimensionShape:
    """Classify a dimension tuple as ZERO, ONE or TWO."""
    count = len(dimensions)
    if count > MAX_DIMENSIONS:
        raise ValueError(f"At most {MAX_DIMENSIONS} dimensions are supported, got {count}")
    return DimensionShape(count)
