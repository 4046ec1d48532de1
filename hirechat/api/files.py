"""Signed download endpoint for stored resume files."""

import logging
from pathlib import PurePosixPath

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from hirechat.api.errors import http_error
from hirechat.dependencies import ServiceContainer, get_services
from hirechat.exceptions import HireChatError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{path:path}")
async def download_file(
    path: str,
    token: str = Query(...),
    services: ServiceContainer = Depends(get_services)
):
    """Serve a stored resume when the token was signed for this path and has not expired."""
    if not services.storage.verify_token(token, path):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired download link"
        )

    try:
        content = await services.storage.read(path)
    except HireChatError as e:
        raise http_error(e)

    filename = PurePosixPath(path).name
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
