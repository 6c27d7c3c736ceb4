"""Ownership guard for campaigns."""

import logging

from campaign_api import supabase_client as db

logger = logging.getLogger(__name__)


def get_owned_campaign(campaign_id: str, user_id: str) -> dict | None:
    """Get a campaign only if user_id owns it.

    A campaign owned by someone else looks exactly like one that does not
    exist. Store errors also return None.
    """
    try:
        return db.get_campaign_for_user(campaign_id, user_id)
    except db.StoreError as e:
        logger.error("Error checking campaign %s ownership: %s", campaign_id, e.message)
        return None
