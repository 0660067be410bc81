"""
Export Router - canvas HTML to a PNG/PDF download.

    POST /api/export             {html, format, filename?} -> {downloadUrl, ...}
    GET  /api/downloads/{token}  the exported file (until the link is revoked)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from explainer.export import CanvasExporter, DownloadStore, ExportError, canvas_exporter, download_store
from explainer.schemas.export import ExportRequest, ExportResponse

logger = logging.getLogger("explainer.routers.export")

router = APIRouter(prefix="/api", tags=["export"])


def get_exporter() -> CanvasExporter:
    return canvas_exporter


def get_download_store() -> DownloadStore:
    return download_store


@router.post("/export", response_model=ExportResponse)
async def export_canvas(
    request: ExportRequest,
    exporter: CanvasExporter = Depends(get_exporter),
    downloads: DownloadStore = Depends(get_download_store),
):
    """
    Render the canvas offscreen and register the result for download.

    The returned link works until it is revoked (60 seconds by default).
    """
    try:
        link = await exporter.export_canvas(request.html, request.format, filename=request.filename)
    except ExportError as e:
        logger.error(f"Export failed ({e.phase}): {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Export failed: {e.message}",
        )

    return ExportResponse(
        download_url=link.url,
        filename=link.file.filename,
        media_type=link.file.media_type,
        page_count=link.file.page_count,
        expires_in=downloads.ttl_seconds,
    )


@router.get("/downloads/{token}")
async def download(
    token: str,
    downloads: DownloadStore = Depends(get_download_store),
):
    link = downloads.get(token)
    if link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Download expired or not found")

    return Response(
        content=link.file.data,
        media_type=link.file.media_type,
        headers={"Content-Disposition": f'attachment; filename="{link.file.filename}"'},
    )
