"""Celery task persisting decoded webhook events."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from app.adapters import build_adapter_registry
from app.db import db_manager
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.schemas.omnichannel import InboundEvent, StatusEvent
from app.services.inbound_processor import InboundProcessor

logger = get_logger("inbound_events")


def _validate_all(model, items: Optional[List[Dict[str, Any]]]) -> list:
    valid = []
    for item in items or []:
        try:
            valid.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping invalid %s: %s", model.__name__, e)
    return valid


@celery_app.task(name="app.tasks.process_inbound_events_task.process_inbound_events_task")
def process_inbound_events_task(
    events: List[Dict[str, Any]],
    statuses: Optional[List[Dict[str, Any]]] = None,
) -> int:
    """
    Persist inbound events decoded by the webhook endpoint.

    The webhook has already been acknowledged to the platform; this task
    resolves contacts and conversations and records each message.

    Args:
        events: InboundEvent dicts (JSON mode).
        statuses: StatusEvent dicts (JSON mode) to apply to sent messages.

    Returns:
        int: number of new messages stored.
    """
    processor = InboundProcessor(db_manager.db_session, build_adapter_registry())
    return processor.process(
        _validate_all(InboundEvent, events),
        _validate_all(StatusEvent, statuses),
    )
