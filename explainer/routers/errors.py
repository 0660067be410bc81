"""
Exception -> HTTP status mapping shared by the generation endpoints.

    InvalidRequestError  422  rejected before any remote call
    StageTimeoutError    504  the model did not answer in time
    UpstreamError        502  the model endpoint rejected or errored
    anything else        500
"""

import logging

from fastapi import HTTPException, status

from explainer.ai.pipeline.errors import InvalidRequestError, StageTimeoutError, UpstreamError

logger = logging.getLogger("explainer.routers")


def to_http_exception(error: Exception, action: str) -> HTTPException:
    if isinstance(error, InvalidRequestError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=error.message)

    if isinstance(error, StageTimeoutError):
        logger.warning(f"{action} timed out: {error}")
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=f"Request timed out: {error.message}")

    if isinstance(error, UpstreamError):
        logger.error(f"{action} failed upstream (stage={error.stage}, status={error.status_code}): {error}")
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error.message)

    logger.error(f"{action} failed: {error}", exc_info=error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(error) or "An unexpected error occurred",
    )
