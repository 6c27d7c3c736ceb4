"""Sequence steps service — read and replace a campaign's ordered steps."""

import logging

from campaign_api import supabase_client as db

logger = logging.getLogger(__name__)

DEFAULT_CONTENT = ""
DEFAULT_TIMING_DAYS = 1
DEFAULT_VARIANTS = 1
DEFAULT_OUTREACH_METHOD = "email"


class InvalidSequencesPayload(ValueError):
    """Request body does not carry a usable ``sequences`` list."""


def parse_sequences(body) -> list[dict]:
    """Pull the ``sequences`` list out of a request body.

    A missing or null ``sequences`` is an empty list. Anything that is not a
    list of objects raises InvalidSequencesPayload.
    """
    if not isinstance(body, dict):
        raise InvalidSequencesPayload("body must be a JSON object")

    sequences = body.get("sequences")
    if sequences is None:
        return []
    if not isinstance(sequences, list):
        raise InvalidSequencesPayload("sequences must be a list")

    for i, seq in enumerate(sequences, start=1):
        if not isinstance(seq, dict):
            raise InvalidSequencesPayload(f"step {i} is not an object")
    return sequences


def build_step_rows(campaign_id: str, sequences: list[dict]) -> list[dict]:
    """Turn request steps into rows. Position in the list sets step_number."""
    return [
        {
            "campaign_id": campaign_id,
            "step_number": index,
            "subject": seq.get("subject") or None,
            "content": seq.get("content") or DEFAULT_CONTENT,
            "timing_days": seq.get("timing") or DEFAULT_TIMING_DAYS,
            "variants": seq.get("variants") or DEFAULT_VARIANTS,
            "outreach_method": seq.get("outreach_method") or DEFAULT_OUTREACH_METHOD,
        }
        for index, seq in enumerate(sequences, start=1)
    ]


def list_steps(campaign_id: str) -> list[dict]:
    """Get a campaign's steps ordered by step_number. Raises StoreError."""
    return db.get_sequence_steps(campaign_id)


def replace_steps(campaign_id: str, sequences: list[dict]) -> list[dict]:
    """Replace every step of a campaign with ``sequences``.

    Deletes first. If the delete fails nothing is inserted. If the insert
    fails for any reason the deleted rows are put back before the error
    propagates. Returns the inserted rows, or [] when ``sequences`` is empty.
    """
    removed = db.delete_sequence_steps(campaign_id)

    if not sequences:
        return []

    rows = build_step_rows(campaign_id, sequences)
    try:
        return db.insert_sequence_steps(rows)
    except db.StoreError as e:
        logger.error("Error inserting %d steps for campaign %s: %s",
                     len(rows), campaign_id, e.message)
        _restore_steps(campaign_id, removed)
        raise
    except Exception:
        logger.exception("Error inserting %d steps for campaign %s", len(rows), campaign_id)
        _restore_steps(campaign_id, removed)
        raise


def _restore_steps(campaign_id: str, removed: list[dict]) -> None:
    """Re-insert steps removed by a replace whose insert failed."""
    if not removed:
        return
    try:
        db.insert_sequence_steps(removed)
        logger.info("Restored %d steps for campaign %s", len(removed), campaign_id)
    except db.StoreError as e:
        logger.error("Failed to restore %d steps for campaign %s: %s",
                     len(removed), campaign_id, e.message)
    except Exception:
        logger.exception("Failed to restore %d steps for campaign %s", len(removed), campaign_id)
