"""
Export schemas - request/response formats for the export endpoint.
"""

from typing import Optional

from pydantic import Field

from explainer.export.contracts import ExportFormat
from explainer.schemas.explain import CamelModel


class ExportRequest(CamelModel):
    """
    Example request body:
    {
        "html": "<!DOCTYPE html>...",
        "format": "pdf",
        "filename": "photosynthesis"
    }
    """
    html: str = Field(..., min_length=1)
    format: ExportFormat = ExportFormat.PNG
    filename: Optional[str] = Field(None, max_length=120)


class ExportResponse(CamelModel):
    """
    Example response:
    {
        "downloadUrl": "/api/downloads/Zk3...",
        "filename": "photosynthesis.pdf",
        "mediaType": "application/pdf",
        "pageCount": 2,
        "expiresIn": 60
    }
    """
    download_url: str
    filename: str
    media_type: str
    page_count: int = 1
    expires_in: float
