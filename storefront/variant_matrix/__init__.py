# Variant Matrix
# Derives sellable variant rows from up to two variation dimensions

from .models import (
    MAX_DIMENSIONS,
    DimensionShape,
    ImageSizeChart,
    MatrixState,
    RowField,
    SizeChart,
    TemplateSizeChart,
    VariantRow,
    VariationDimension,
)
from .errors import (
    DimensionIndexError,
    MediaBindingError,
    OptionRejectedError,
    UploadError,
    VariantMatrixError,
)
from .config import MatrixSettings, default_config, get_settings, load_config
from .synthesizer import SynthesisResult, identity_key, synthesize
from .dimensions import add_dimension, add_option, remove_dimension, remove_option, rename_dimension
from .rows import bulk_apply, row_groups, set_field
from .media import InMemoryUploadService, UploadService, bind_image, unbind_image
from .size_chart import is_size_chart_relevant, size_chart_advisories
from .payload import VariationPayload, build_submission, reconstruct_state
from .session import VariationSession
from .report import export_csv, export_xlsx, format_console

__version__ = "1.0.0"

__all__ = [
    # Models
    "MAX_DIMENSIONS",
    "DimensionShape",
    "ImageSizeChart",
    "MatrixState",
    "RowField",
    "SizeChart",
    "TemplateSizeChart",
    "VariantRow",
    "VariationDimension",
    # Errors
    "DimensionIndexError",
    "MediaBindingError",
    "OptionRejectedError",
    "UploadError",
    "VariantMatrixError",
    # Config
    "MatrixSettings",
    "default_config",
    "get_settings",
    "load_config",
    # Synthesizer
    "SynthesisResult",
    "identity_key",
    "synthesize",
    # Dimensions
    "add_dimension",
    "add_option",
    "remove_dimension",
    "remove_option",
    "rename_dimension",
    # Rows
    "bulk_apply",
    "row_groups",
    "set_field",
    # Media
    "InMemoryUploadService",
    "UploadService",
    "bind_image",
    "unbind_image",
    # Size chart
    "is_size_chart_relevant",
    "size_chart_advisories",
    # Form boundary
    "VariationPayload",
    "VariationSession",
    "build_submission",
    "reconstruct_state",
    # Report
    "export_csv",
    "export_xlsx",
    "format_console",
]
