"""
Variation Session - The product form's handle on the variant matrix.

Every command runs synchronously: it computes a new MatrixState, swaps it
in, and notifies the form once through on_change. Rejected commands raise
and leave the state as it was.

Uploads are the only awaitable commands. Other commands keep working while
an upload is in flight; when it resolves, the URL is only applied if the
target is still relevant and no newer upload replaced it.
"""

import logging
from typing import Any, Callable, Optional

from . import dimensions as dimension_store
from . import rows as row_editor
from .config import MatrixSettings, get_settings
from .errors import MediaBindingError, UploadError
from .media import UploadService, bind_image, image_options
from .models import MatrixState, RowField, SizeChart, VariantRow, VariationDimension
from .payload import VariationPayload, build_submission
from .size_chart import select_image, select_template, set_size_chart, size_chart_advisories

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[tuple[VariationDimension, ...], tuple[VariantRow, ...], dict[str, str]], None]
SizeChartCallback = Callable[[Optional[SizeChart]], None]


class VariationSession:
    """
    Owns one product form's MatrixState.

    on_change(dimensions, rows, media) fires once per settled mutation that
    changed any of the three. on_size_chart_change(size_chart) fires when
    the size chart changes.
    """

    def __init__(
        self,
        state: Optional[MatrixState] = None,
        settings: Optional[MatrixSettings] = None,
        uploader: Optional[UploadService] = None,
        on_change: Optional[ChangeCallback] = None,
        on_size_chart_change: Optional[SizeChartCallback] = None,
    ):
        self._state = state or MatrixState()
        self.settings = settings or get_settings()
        self.uploader = uploader
        self.on_change = on_change
        self.on_size_chart_change = on_size_chart_change

        # Latest upload token per option value, for dropping stale results
        self._image_uploads: dict[str, int] = {}
        self._size_chart_token = 0
        self._next_token = 0

    @property
    def state(self) -> MatrixState:
        return self._state

    @property
    def dimensions(self) -> tuple[VariationDimension, ...]:
        return self._state.dimensions

    @property
    def rows(self) -> tuple[VariantRow, ...]:
        return self._state.rows

    @property
    def media(self) -> dict[str, str]:
        return dict(self._state.media)

    @property
    def size_chart(self) -> Optional[SizeChart]:
        return self._state.size_chart

    def _commit(self, new_state: MatrixState) -> bool:
        """Swap in new_state and notify. Returns False if nothing changed."""
        old = self._state
        if new_state is old or new_state == old:
            return False

        self._state = new_state

        matrix_changed = (
            new_state.dimensions != old.dimensions
            or new_state.rows != old.rows
            or new_state.media != old.media
        )
        if matrix_changed and self.on_change:
            self.on_change(new_state.dimensions, new_state.rows, dict(new_state.media))

        if new_state.size_chart != old.size_chart and self.on_size_chart_change:
            self.on_size_chart_change(new_state.size_chart)

        return True

    def _take_token(self) -> int:
        self._next_token += 1
        return self._next_token

    # ---------------------------------------------------------------------
    # Dimensions
    # ---------------------------------------------------------------------

    def add_dimension(self) -> bool:
        return self._commit(dimension_store.add_dimension(self._state, self.settings))

    def remove_dimension(self, index: int) -> bool:
        """
        Remove a dimension, discarding all row data and images.

        Callers should confirm with the user first when has_row_data() is True.
        """
        changed = self._commit(dimension_store.remove_dimension(self._state, index))
        # Uploads started before the reset must not land afterwards
        self._image_uploads = {}
        return changed

    def rename_dimension(self, index: int, name: str) -> bool:
        return self._commit(dimension_store.rename_dimension(self._state, index, name))

    def add_option(self, dim_index: int, value: str) -> bool:
        """
        Add an option value.

        Raises:
            OptionRejectedError: blank or duplicate value (state unchanged)
        """
        return self._commit(dimension_store.add_option(self._state, dim_index, value))

    def remove_option(self, dim_index: int, value: str) -> bool:
        changed = self._commit(dimension_store.remove_option(self._state, dim_index, value))
        if dim_index == 0:
            self._image_uploads.pop(value, None)
        return changed

    # ---------------------------------------------------------------------
    # Rows
    # ---------------------------------------------------------------------

    def set_field(self, row_index: int, field: RowField | str, raw_value: Any) -> bool:
        return self._commit(row_editor.set_field(self._state, row_index, field, raw_value))

    def bulk_apply(self, price: Any = None, stock: Any = None, sku: Any = None) -> bool:
        return self._commit(row_editor.bulk_apply(self._state, price=price, stock=stock, sku=sku))

    def has_row_data(self) -> bool:
        return row_editor.has_row_data(self._state)

    # ---------------------------------------------------------------------
    # Media
    # ---------------------------------------------------------------------

    def _require_uploader(self) -> UploadService:
        if self.uploader is None:
            raise UploadError("No upload service configured")
        return self.uploader

    async def bind_image(self, option: str, blob: bytes, filename: str = "") -> bool:
        """
        Upload an image and bind it to a dimension-0 option value.

        Returns:
            True if the image was bound, False if the result arrived stale
            (option removed, dimensions reset, or a newer upload started)

        Raises:
            MediaBindingError: option is not a dimension-0 value
            UploadError: upload failed (media map untouched)
        """
        if option not in image_options(self._state):
            raise MediaBindingError(f"'{option}' is not an option of the first variation")

        uploader = self._require_uploader()
        token = self._take_token()
        self._image_uploads[option] = token

        try:
            url = await uploader.upload_file(blob, filename)
        except UploadError as e:
            logger.error(f"Variation image upload failed for '{option}': {e}")
            if self._image_uploads.get(option) == token:
                del self._image_uploads[option]
            raise

        if self._image_uploads.get(option) != token:
            logger.warning(f"Dropping stale image upload for '{option}'")
            return False
        del self._image_uploads[option]

        if option not in image_options(self._state):
            logger.warning(f"Dropping image upload for removed option '{option}'")
            return False

        return self._commit(bind_image(self._state, option, url))

    # ---------------------------------------------------------------------
    # Size chart
    # ---------------------------------------------------------------------

    def select_size_chart_template(self, template_id: str) -> bool:
        self._size_chart_token = self._take_token()
        return self._commit(set_size_chart(self._state, select_template(template_id)))

    def clear_size_chart(self) -> bool:
        self._size_chart_token = self._take_token()
        return self._commit(set_size_chart(self._state, None))

    async def upload_size_chart_image(self, blob: bytes, filename: str = "") -> bool:
        """
        Upload a size chart image and select it.

        Returns False if the size chart was changed while uploading.

        Raises:
            UploadError: upload failed (size chart untouched)
        """
        uploader = self._require_uploader()
        token = self._take_token()
        self._size_chart_token = token

        try:
            url = await uploader.upload_file(blob, filename)
        except UploadError as e:
            logger.error(f"Size chart upload failed: {e}")
            raise

        if self._size_chart_token != token:
            logger.warning("Dropping stale size chart upload")
            return False

        return self._commit(set_size_chart(self._state, select_image(url)))

    def advisories(self) -> list[str]:
        """Non-blocking warnings to show next to the form."""
        return size_chart_advisories(self._state, self.settings)

    # ---------------------------------------------------------------------
    # Submission
    # ---------------------------------------------------------------------

    def submission(self) -> VariationPayload:
        """Map the current state into the product submission payload."""
        return build_submission(self._state, self.settings)
