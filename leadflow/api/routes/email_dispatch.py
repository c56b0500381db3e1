"""Transactional email dispatch endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.api.deps import get_relay_factory
from leadflow.api.schemas.dispatch import DispatchRequest, DispatchResponse, ErrorResponse
from leadflow.core.errors import CategoryNotFoundError, DispatchError, SubmissionNotFoundError
from leadflow.domain.services.dispatch_service import RelayFactory, dispatch_submission
from leadflow.domain.services.tenant_resolver import effective_hostname
from leadflow.persistence.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{category_slug}/{event_type}",
    response_model=DispatchResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def dispatch_email(
    category_slug: str,
    event_type: str,
    body: DispatchRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    relay_factory: Annotated[RelayFactory, Depends(get_relay_factory)],
    subdomain: Annotated[str | None, Query()] = None,
):
    """Render and send the notifications for one lead event.

    The tenant is resolved from ``?subdomain=``, then the body ``subdomain``,
    then the Host header.
    """
    hostname = effective_hostname(subdomain, body.subdomain, request.headers.get("host"))

    try:
        result = await dispatch_submission(
            db,
            category_slug=category_slug,
            event_type=event_type,
            hostname=hostname,
            submission_id=body.submission_id,
            record=body.lead_data,
            relay_factory=relay_factory,
        )
    except (CategoryNotFoundError, SubmissionNotFoundError) as e:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=e.to_dict())
    except DispatchError as e:
        logger.warning(f"Dispatch rejected for {category_slug}/{event_type}: {e.kind}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=e.to_dict())

    return result.to_response()
