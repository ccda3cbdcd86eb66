"""
Tests for report generator.

Run with: pytest storefront/variant_matrix/tests/test_report.py -v
"""

import io
from dataclasses import replace
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from storefront.variant_matrix.config import MatrixSettings
from storefront.variant_matrix.models import MatrixState, TemplateSizeChart, VariationDimension
from storefront.variant_matrix.report import (
    export_csv,
    export_xlsx,
    format_console,
    generate_report_filename,
)
from storefront.variant_matrix.rows import set_field
from storefront.variant_matrix.synthesizer import synthesize


@pytest.fixture
def settings():
    return MatrixSettings()


def make_state(*dimensions):
    dims = tuple(
        VariationDimension(id=name, name=name, options=tuple(options))
        for name, options in dimensions
    )
    return MatrixState(dimensions=dims, rows=synthesize(dims, ()).rows)


@pytest.fixture
def grid_state():
    state = make_state(("Color", ["Red", "Blue"]), ("Size", ["S", "M"]))
    state = set_field(state, 0, "price", "10.50")
    state = set_field(state, 0, "sku", "TEE-RED-S")
    return replace(state, media={"Red": "u/red.png"})


class TestFormatConsole:

    def test_no_dimensions(self, settings):
        assert "No variations" in format_console(MatrixState(), settings)

    def test_empty_dimension(self, settings):
        state = make_state(("Color", ["Red"]), ("Size", []))
        report = format_console(state, settings)
        assert "add options to: Size" in report

    def test_headers(self, grid_state, settings):
        report = format_console(grid_state, settings)
        header = report.splitlines()[0]
        assert "Color" in header
        assert "Size" in header
        assert "Price (RM)" in header

    def test_row_span(self, grid_state, settings):
        lines = format_console(grid_state, settings).splitlines()
        data = lines[2:6]
        assert data[0].startswith("Red [img]")
        assert data[1].startswith(" ")
        assert data[2].startswith("Blue")
        assert data[3].startswith(" ")
        assert "10.50" in data[0]
        assert "TEE-RED-S" in data[0]

    def test_summary(self, grid_state, settings):
        report = format_console(grid_state, settings)
        assert "Rows:   4" in report
        assert "Images: 1" in report

    def test_size_chart_advisory(self, grid_state, settings):
        assert "Note:" in format_console(grid_state, settings)
        charted = replace(grid_state, size_chart=TemplateSizeChart(template_id="t"))
        report = format_console(charted, settings)
        assert "Note:" not in report
        assert "Size chart: template" in report

    def test_single_dimension(self, settings):
        state = make_state(("Color", ["Red", "Blue"]))
        lines = format_console(state, settings).splitlines()
        assert lines[2].startswith("Red")
        assert lines[3].startswith("Blue")


class TestExportCSV:

    def test_header_and_rows(self, grid_state, settings):
        content = export_csv(grid_state, settings=settings)
        lines = content.strip().splitlines()
        assert lines[0] == "identity_key,Color,Size,Price (RM),Stock,SKU,image_url"
        assert lines[1] == "Red-S,Red,S,10.50,0,TEE-RED-S,u/red.png"
        assert lines[3] == "Blue-S,Blue,S,0,0,,"
        assert len(lines) == 5

    def test_writes_to_output(self, grid_state, settings):
        output = io.StringIO()
        result = export_csv(grid_state, output=output, settings=settings)
        assert output.getvalue() == result


class TestExportXLSX:

    def test_workbook(self, grid_state, settings, tmp_path):
        path = tmp_path / "variants.xlsx"
        content = export_xlsx(grid_state, path, settings=settings)
        assert path.read_bytes() == content

        ws = load_workbook(path).active
        assert ws.title == "Variants"
        assert [c.value for c in ws[1]] == ["Color", "Size", "Price (RM)", "Stock", "SKU", "Image URL"]
        assert ws.cell(row=2, column=1).value == "Red"
        assert ws.cell(row=2, column=3).value == 10.5
        assert ws.cell(row=2, column=5).value == "TEE-RED-S"
        assert ws.cell(row=2, column=6).value == "u/red.png"
        assert ws.cell(row=4, column=1).value == "Blue"

    def test_merged_groups(self, grid_state, settings):
        ws = load_workbook(io.BytesIO(export_xlsx(grid_state, settings=settings))).active
        merged = {str(r) for r in ws.merged_cells.ranges}
        assert "A2:A3" in merged
        assert "A4:A5" in merged
        assert "F2:F3" in merged

    def test_single_dimension_not_merged(self, settings):
        state = make_state(("Color", ["Red", "Blue"]))
        ws = load_workbook(io.BytesIO(export_xlsx(state, settings=settings))).active
        assert not ws.merged_cells.ranges
        assert ws.cell(row=3, column=1).value == "Blue"


class TestReportFilename:

    def test_with_product(self):
        name = generate_report_filename("Summer Tee!")
        assert name.startswith("variants_Summer_Tee_")
        assert name.endswith(".csv")

    def test_without_product(self):
        name = generate_report_filename(extension="xlsx")
        assert name.startswith("variants_")
        assert name.endswith(".xlsx")
