"""
Tests for models and config.

Run with: pytest storefront/variant_matrix/tests/test_models_config.py -v
"""

import json

import pytest
from decimal import Decimal

from storefront.variant_matrix.models import (
    DimensionShape,
    ImageSizeChart,
    MatrixState,
    TemplateSizeChart,
    VariantRow,
    VariationDimension,
    shape_of,
)
from storefront.variant_matrix.config import (
    DEFAULT_CONFIG_PATH,
    MatrixSettings,
    default_config,
    load_config,
)


class TestVariantRow:
    """Test VariantRow dataclass."""

    def test_defaults(self):
        row = VariantRow(identity_key="Red", value1="Red")
        assert row.value2 is None
        assert row.price == Decimal("0")
        assert row.stock == 0
        assert row.sku == ""
        assert not row.has_data()

    def test_values_single_dimension(self):
        row = VariantRow(identity_key="Red", value1="Red")
        assert row.values == ("Red",)

    def test_values_two_dimensions(self):
        row = VariantRow(identity_key="Red-S", value1="Red", value2="S")
        assert row.values == ("Red", "S")

    def test_has_data(self):
        assert VariantRow(identity_key="Red", value1="Red", price=Decimal("1")).has_data()
        assert VariantRow(identity_key="Red", value1="Red", stock=3).has_data()
        assert VariantRow(identity_key="Red", value1="Red", sku="x").has_data()

    def test_frozen(self):
        row = VariantRow(identity_key="Red", value1="Red")
        with pytest.raises(AttributeError):
            row.price = Decimal("5")


class TestShape:
    """Test dimension shape classification."""

    def test_zero_one_two(self):
        color = VariationDimension(id="1", name="Color")
        size = VariationDimension(id="2", name="Size")
        assert shape_of(()) == DimensionShape.ZERO
        assert shape_of((color,)) == DimensionShape.ONE
        assert shape_of((color, size)) == DimensionShape.TWO

    def test_too_many(self):
        dims = tuple(VariationDimension(id=str(i), name=f"D{i}") for i in range(3))
        with pytest.raises(ValueError):
            shape_of(dims)

    def test_state_shape(self):
        assert MatrixState().shape == DimensionShape.ZERO

    def test_media_is_read_only(self):
        state = MatrixState(media={"Red": "u/red.png"})
        with pytest.raises(TypeError):
            state.media["Blue"] = "u/blue.png"
        with pytest.raises(TypeError):
            del state.media["Red"]

    def test_media_copied_on_construction(self):
        images = {"Red": "u/red.png"}
        state = MatrixState(media=images)
        images["Blue"] = "u/blue.png"
        assert dict(state.media) == {"Red": "u/red.png"}

    def test_equal_media_compares_equal(self):
        assert MatrixState(media={"Red": "u"}) == MatrixState(media={"Red": "u"})


class TestSizeChartModels:

    def test_kinds(self):
        assert TemplateSizeChart(template_id="t1").kind == "template"
        assert ImageSizeChart(url="http://x/chart.png").kind == "image"


class TestLoadConfig:
    """Test config loading."""

    def test_bundled_config(self):
        settings = default_config()
        assert settings.default_dimension_names == ["Color", "Size"]
        assert settings.size_dimension_names == ["size"]
        assert settings.currency_label == "RM"
        assert settings.submission.srp_markup == Decimal("1.2")
        assert settings.submission.price_quantum == Decimal("0.01")
        assert settings.submission.uppercase_sku is True

    def test_bundled_config_exists(self):
        assert DEFAULT_CONFIG_PATH.exists()

    def test_partial_config_uses_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "size_dimension_names": [" Size ", "Taille"],
            "submission": {"srp_markup": 1.5},
        }))
        settings = load_config(path)

        assert settings.size_dimension_names == ["size", "taille"]
        assert settings.submission.srp_markup == Decimal("1.5")
        assert settings.submission.uppercase_sku is True
        assert settings.default_dimension_names == ["Color", "Size"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")


class TestDefaultDimensionName:

    def test_by_position(self):
        settings = MatrixSettings()
        assert settings.default_dimension_name(0) == "Color"
        assert settings.default_dimension_name(1) == "Size"

    def test_past_configured_names(self):
        settings = MatrixSettings(default_dimension_names=[])
        assert settings.default_dimension_name(0) == "Variation 1"
