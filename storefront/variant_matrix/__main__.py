"""
CLI entry point for the variant matrix.

Usage:
    python -m storefront.variant_matrix --dimension Color=Red,Blue --dimension Size=S,M
    python -m storefront.variant_matrix --from-json product.json --output-xlsx variants.xlsx
    python -m storefront.variant_matrix --dimension Color=Red,Blue --bulk-price 25 --payload
    python -m storefront.variant_matrix --from-json product.json --output-csv
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import get_settings, load_config
from .errors import OptionRejectedError, VariantMatrixError
from .models import MAX_DIMENSIONS
from .payload import reconstruct_state
from .report import export_csv, export_xlsx, format_console, generate_report_filename
from .session import VariationSession


def parse_dimension_arg(raw: str) -> tuple[str, list[str]]:
    """Split "Color=Red,Blue" into ("Color", ["Red", "Blue"])."""
    if "=" not in raw:
        raise ValueError(f"Expected NAME=value1,value2 but got '{raw}'")
    name, _, values = raw.partition("=")
    name = name.strip()
    if not name:
        raise ValueError(f"Dimension name missing in '{raw}'")
    return name, [v for v in values.split(",")]


def load_persisted(path: Path) -> dict:
    """Read a saved product JSON. A bare list is treated as the variants."""
    with open(path, "r") as f:
        data = json.load(f)
    if isinstance(data, list):
        return {"variants": data}
    return data


def product_name(args) -> str | None:
    """Name used for default output files: the saved product's name, else the file stem."""
    if not args.from_json:
        return None
    path = Path(args.from_json)
    data = load_persisted(path)
    return data.get("name") or path.stem


def build_session(args, settings) -> VariationSession:
    if args.from_json:
        data = load_persisted(Path(args.from_json))
        state = reconstruct_state(
            data.get("variants", []),
            variation_images=data.get("variationImages"),
            size_chart=data.get("sizeChart"),
        )
        return VariationSession(state=state, settings=settings)

    session = VariationSession(settings=settings)
    for index, raw in enumerate(args.dimension or []):
        name, values = parse_dimension_arg(raw)
        session.add_dimension()
        session.rename_dimension(index, name)
        for value in values:
            try:
                session.add_option(index, value)
            except OptionRejectedError as e:
                print(f"Warning: {e}", file=sys.stderr)
    return session


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="variant_matrix",
        description="Variant Matrix - Preview the sellable rows for a product's variations",
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--dimension",
        action="append",
        metavar="NAME=V1,V2",
        help=f"Variation dimension and its options (repeat up to {MAX_DIMENSIONS} times)",
    )
    source.add_argument(
        "--from-json",
        metavar="FILE",
        help="Saved product JSON with 'variants' (and optional 'variationImages', 'sizeChart')",
    )

    parser.add_argument("--bulk-price", help="Set this price on every row")
    parser.add_argument("--bulk-stock", help="Set this stock on every row")
    parser.add_argument("--bulk-sku", help="Set this SKU on every row")

    parser.add_argument(
        "--config",
        default=None,
        metavar="FILE",
        help="Matrix config file (default: module's matrix_config.json)",
    )
    parser.add_argument(
        "--output-csv",
        nargs="?",
        const="",
        metavar="FILE",
        help="Output CSV file path (default name if FILE is omitted)",
    )
    parser.add_argument(
        "--output-xlsx",
        nargs="?",
        const="",
        metavar="FILE",
        help="Output XLSX file path (default name if FILE is omitted)",
    )
    parser.add_argument(
        "--payload",
        action="store_true",
        help="Print the submission payload as JSON",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress console table",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.dimension and len(args.dimension) > MAX_DIMENSIONS:
        print(f"Error: at most {MAX_DIMENSIONS} dimensions are supported", file=sys.stderr)
        sys.exit(1)

    try:
        if args.config:
            config_path = Path(args.config)
            if not config_path.exists():
                print(f"Error: Config file not found: {config_path}", file=sys.stderr)
                sys.exit(1)
            settings = load_config(config_path)
        else:
            settings = get_settings()

        session = build_session(args, settings)
        session.bulk_apply(price=args.bulk_price, stock=args.bulk_stock, sku=args.bulk_sku)

        if not args.quiet:
            print(format_console(session.state, settings))

        if args.payload:
            print(json.dumps(session.submission().to_api(), indent=2))

        if args.output_csv is not None:
            output_path = Path(args.output_csv or generate_report_filename(product_name(args), "csv"))
            with open(output_path, "w", newline="") as f:
                export_csv(session.state, output=f, settings=settings)
            if not args.quiet:
                print(f"\nCSV exported to: {output_path}")

        if args.output_xlsx is not None:
            xlsx_path = Path(args.output_xlsx or generate_report_filename(product_name(args), "xlsx"))
            export_xlsx(session.state, xlsx_path, settings=settings)
            if not args.quiet:
                print(f"\nXLSX exported to: {xlsx_path}")

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, VariantMatrixError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
