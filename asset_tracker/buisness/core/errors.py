"""
Domain exceptions for the asset tracker

These exceptions represent authentication, authorization, validation and
business rule violations. The business layer raises them; the presentation
layer renders them with the HTTP status each class carries.
"""


class AssetTrackerError(Exception):
    """Base exception for all asset tracker domain errors"""
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class UnauthenticatedError(AssetTrackerError):
    """Raised when no credential, or an invalid one, is presented"""
    status_code = 401
    default_message = "Not authenticated"


class ForbiddenError(AssetTrackerError):
    """Raised when a valid identity lacks the required role"""
    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(AssetTrackerError):
    """Raised when a referenced entity does not exist"""
    status_code = 404
    default_message = "Resource not found"


class ValidationFailedError(AssetTrackerError):
    """Raised when input fields are missing or malformed"""
    status_code = 400
    default_message = "Validation failed"


class ConflictError(AssetTrackerError):
    """Raised when a unique key or concurrent write collides"""
    status_code = 409
    default_message = "A record with this information already exists"


class InternalError(AssetTrackerError):
    """Raised for persistence or unexpected failures; message is never shown to callers"""
    status_code = 500


# Asset state machine

class NotAvailableError(AssetTrackerError):
    """Raised when an asset is not in a status that allows the operation"""
    status_code = 400
    default_message = "Asset is not available for assignment"


class AlreadyAssignedError(AssetTrackerError):
    """Raised when an asset already has an open assignment"""
    status_code = 400
    default_message = "Asset is already assigned to another user"


class NotAssignedError(AssetTrackerError):
    """Raised when returning or revoking an asset with no open assignment"""
    status_code = 400
    default_message = "Asset is not currently assigned"


class TargetNotFoundError(NotFoundError):
    """Raised when the user an asset is assigned to does not exist"""
    default_message = "Target user not found"


class AssetConsistencyError(InternalError):
    """Raised when asset status and open assignment rows disagree"""
    default_message = "Asset status is inconsistent with its assignments"


# Request workflow

class MissingAssetError(ValidationFailedError):
    """Raised when a replacement request names no asset"""
    default_message = "Asset ID is required for replacement requests"


class TransitionError(AssetTrackerError):
    """Raised when a state transition is invalid or not allowed"""
    status_code = 400
    default_message = "Invalid status transition"


# Catalogue

class DuplicateNameError(ConflictError):
    """Raised when an asset type name is already taken"""
    default_message = "Asset type with this name already exists"


# Audit log

class ImmutableHistoryError(InternalError):
    """Raised when code tries to modify or delete a history entry"""
    default_message = "History entries are append-only"
