"""Domain errors for homes, rooms and photo analysis."""


class InventoryError(Exception):
    """Base class for home inventory errors."""


class ValidationError(InventoryError):
    """Raised when a request is rejected before any side effect."""


class NotFoundError(InventoryError):
    """Raised when a home or room does not exist."""


class StorageError(InventoryError):
    """Raised when the object store fails for reasons other than a missing object."""


class AnalysisError(InventoryError):
    """Base class for failures inside a room analysis run."""

    user_message = "The analysis could not be completed."


class UploadError(AnalysisError):
    """Raised when a photo upload fails."""

    user_message = "Could not upload photos. Your selection was kept for retry."


class RecognitionError(AnalysisError):
    """Raised when the object recognition call fails or returns bad data."""

    user_message = "Could not identify objects in the photos. Please try again."


class PersistError(AnalysisError):
    """Raised when a recognition result could not be saved."""

    user_message = "Objects were identified but the results could not be saved."


class StaleAnalysisError(PersistError):
    """Raised when a newer analysis run took over the room before this one saved."""

    user_message = "A newer analysis of this room is in progress."
