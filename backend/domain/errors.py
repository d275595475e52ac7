"""
Error types for the asset processing pipeline.

Validation errors (not found, access denied, conflict) are raised to callers
before any background work starts. Collaborator, persistence and invalid-asset
errors only ever happen inside a running job and end up as a Failed status.
"""


class AssetError(Exception):
    """Base exception for all asset pipeline failures."""


class AssetNotFoundError(AssetError):
    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"Video not found: {asset_id}")


class ProjectNotFoundError(AssetError):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class AccessDeniedError(AssetError):
    def __init__(self, asset_id: str, requester_id: str):
        self.asset_id = asset_id
        self.requester_id = requester_id
        super().__init__(f"Access denied to video {asset_id}")


class ProcessingConflictError(AssetError):
    """Raised when an operation is not allowed in the asset's current status."""

    def __init__(self, asset_id: str, status: str, action: str):
        self.asset_id = asset_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} video {asset_id} while status={status}")


class InvalidAssetError(AssetError):
    """Asset data is malformed, e.g. it has no source to process."""


class CollaboratorError(AssetError):
    """The AI collaborator could not produce a result."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class StoreError(AssetError):
    """The status store failed to persist an update."""


class ProcessingCancelledError(AssetError):
    def __init__(self, message: str = "Processing cancelled"):
        super().__init__(message)
