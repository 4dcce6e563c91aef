"""
Custom exceptions for the record store.

Absent keys are not errors: lookups return empty results and deletes return
False. These exceptions cover misuse of the raw heap and malformed input.
"""


class InvalidRowIdError(IndexError):
    """
    Raised when a RowId that was never assigned is used to address the heap.
    """

    def __init__(self, row_id: int, heap_size: int):
        """
        Initialize the error.

        Args:
            row_id: The offending RowId.
            heap_size: Number of slots in the heap at the time of the call.
        """
        self.row_id = row_id
        self.heap_size = heap_size
        super().__init__(
            f"RowId {row_id} is not assigned: heap holds {heap_size} slots"
        )


class RecordFormatError(ValueError):
    """Raised when external input cannot be turned into a Record."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)
