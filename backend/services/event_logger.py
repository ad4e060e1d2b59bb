"""
Visitas CRM - Event Logger

Centralized audit trail for all sensitive actions.
Single function to call from any route/service.
"""

import logging
import uuid
from config import now_iso

logger = logging.getLogger("event_logger")


async def log_event(
    db,
    action: str,
    entity_type: str,
    entity_id: str,
    user: str = "system",
    details: dict = None,
):
    """
    Write a single event to the event_log collection.

    Args:
        action: e.g. login, create_record, delete_record, archive_cycle, create_user
        entity_type: record | cycle | user
        entity_id: ID of the primary entity
        user: username performing the action
        details: free-form dict (old_value, new_value, counts, etc.)

    A failed audit write is logged and never breaks the calling action.
    """
    try:
        await db.event_log.insert_one({
            "id": str(uuid.uuid4()),
            "action": action,
            "entity_type": entity_type,
            "entity_id": str(entity_id),
            "user": user,
            "details": details or {},
            "created_at": now_iso()
        })
    except Exception as e:
        logger.error(f"[EVENT_LOG] {action} {entity_type}/{entity_id} not recorded: {e}")


async def get_events(db, entity_type: str = None, action: str = None, limit: int = 100):
    query = {}
    if entity_type:
        query["entity_type"] = entity_type
    if action:
        query["action"] = action
    return await db.event_log.find(query, {"_id": 0}).sort("created_at", -1).to_list(limit)
