"""Cron endpoints for external schedulers.

Deployments that run several workers, or that disable the in-process
scheduler, can hit these from a system cron instead.
"""

import hmac
import logging

from fastapi import APIRouter, Depends, Header

from pausegate.api.deps import get_auto_disable_service
from pausegate.config import settings
from pausegate.exceptions import ForbiddenException, NotFoundException
from pausegate.schemas.common import APIResponse
from pausegate.services.auto_disable_service import AutoDisableService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["Cron"])


def verify_cron_token(x_cron_token: str | None = Header(None)) -> None:
    """Check the shared secret sent by the cron caller.

    The endpoints do not exist unless CRON_TOKEN is configured.
    """
    if not settings.cron_enabled:
        raise NotFoundException("Cron endpoint")

    if not x_cron_token or not hmac.compare_digest(x_cron_token, settings.cron_token):
        raise ForbiddenException("Invalid cron token")


@router.post(
    "/auto-disable",
    response_model=APIResponse[dict],
    dependencies=[Depends(verify_cron_token)],
)
async def run_auto_disable(
    service: AutoDisableService = Depends(get_auto_disable_service),
):
    """Run the auto-disable check once."""
    disabled = await service.run_due_check()
    logger.info(f"Cron auto-disable check ran (disabled={disabled})")
    return APIResponse(data={"disabled": disabled})
