"""Campaign sequences API — read and replace a campaign's ordered steps.

Both endpoints need a live session cookie and a campaign owned by the
session's user. Every response is ``{"success": bool, "data" | "error": ...}``.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from campaign_api.config import SESSION_COOKIE_NAME
from campaign_api.supabase_client import StoreError
from campaign_api.services.campaigns import get_owned_campaign
from campaign_api.services.sequences import (
    InvalidSequencesPayload,
    list_steps,
    parse_sequences,
    replace_steps,
)
from campaign_api.services.sessions import get_user_id_from_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campaigns")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


def _authorize(request: Request, campaign_id: str) -> JSONResponse | None:
    """Return an error response unless the caller owns the campaign."""
    user_id = get_user_id_from_session(request.cookies.get(SESSION_COOKIE_NAME))
    if not user_id:
        return _error(401, "Not authenticated")

    if not get_owned_campaign(campaign_id, user_id):
        return _error(404, "Campaign not found")
    return None


@router.get("/{campaign_id}/sequences")
async def get_sequences(request: Request, campaign_id: str):
    """List a campaign's steps in send order."""
    try:
        denied = _authorize(request, campaign_id)
        if denied:
            return denied

        try:
            steps = list_steps(campaign_id)
        except StoreError as e:
            logger.error("Error fetching sequences for campaign %s: %s", campaign_id, e.message)
            return _error(500, e.message)

        return {"success": True, "data": steps or []}

    except Exception:
        logger.exception("Error fetching sequences for campaign %s", campaign_id)
        return _error(500, "Internal server error")


@router.post("/{campaign_id}/sequences")
async def save_sequences(request: Request, campaign_id: str):
    """Replace a campaign's steps with the posted list."""
    try:
        denied = _authorize(request, campaign_id)
        if denied:
            return denied

        # No body at all means no sequences
        if not await request.body():
            body = {}
        else:
            try:
                body = await request.json()
            except ValueError:
                return _error(400, "Invalid JSON body")

        try:
            sequences = parse_sequences(body)
        except InvalidSequencesPayload as e:
            logger.warning("Rejected sequences for campaign %s: %s", campaign_id, e)
            return _error(400, "Invalid sequences payload")

        try:
            saved = replace_steps(campaign_id, sequences)
        except StoreError as e:
            logger.error("Error saving sequences for campaign %s: %s", campaign_id, e.message)
            return _error(500, e.message)

        return {"success": True, "data": saved}

    except Exception:
        logger.exception("Error saving sequences for campaign %s", campaign_id)
        return _error(500, "Internal server error")
