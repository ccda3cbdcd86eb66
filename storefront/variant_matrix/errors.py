"""Exceptions raised by the variant matrix."""


class VariantMatrixError(Exception):
    """Base class for variant matrix errors."""


class OptionRejectedError(VariantMatrixError, ValueError):
    """Option value is empty or already present. Message is user-facing."""


class DimensionIndexError(VariantMatrixError, IndexError):
    """No dimension at the given index."""


class MediaBindingError(VariantMatrixError, ValueError):
    """Image bound to something that is not a dimension-0 option."""


class UploadError(VariantMatrixError):
    """The upload service could not store the file."""
