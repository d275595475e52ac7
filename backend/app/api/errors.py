from fastapi import HTTPException

from backend.domain.errors import (
    AccessDeniedError,
    AssetError,
    AssetNotFoundError,
    ProcessingConflictError,
    ProjectNotFoundError,
)


def to_http_exception(exc: AssetError) -> HTTPException:
    if isinstance(exc, AssetNotFoundError):
        return HTTPException(status_code=404, detail="Video not found")
    if isinstance(exc, ProjectNotFoundError):
        return HTTPException(status_code=404, detail="Project not found")
    if isinstance(exc, AccessDeniedError):
        return HTTPException(status_code=403, detail="Access denied")
    if isinstance(exc, ProcessingConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
