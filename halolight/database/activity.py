"""Best-effort activity log writer."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .repository import ActivityLogRepository

logger = logging.getLogger(__name__)


async def record_activity(
    session: AsyncSession,
    actor_id: Optional[str],
    action: str,
    target_type: str,
    target_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    """Write an activity log row; failures are logged and never reach the caller."""
    try:
        await ActivityLogRepository(session).record(actor_id, action, target_type, target_id, metadata)
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.warning(f"Failed to record activity '{action}' on {target_type} {target_id}: {exc}")
