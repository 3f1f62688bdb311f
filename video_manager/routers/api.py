from fastapi import APIRouter, HTTPException, Request, Response, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import json
import logging

from video_manager import database
from video_manager.actions import registry, parse_action
from video_manager.errors import ActionError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request body")
    # pydantic prefixes custom ValueError messages with "Value error, "
    message = message.removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


async def _read_body(request: Request) -> dict:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body must be a JSON object")
    return body


@router.options("/videos")
async def preflight():
    return Response(status_code=status.HTTP_200_OK)


@router.post("/videos")
async def dispatch(request: Request, action: Optional[str] = None):
    """Run the operation selected by the action query parameter"""
    action_kind = parse_action(action)
    meta = registry.get(action_kind) if action_kind else None

    # Only actions that never touch the database run without one
    if (meta is None or meta.needs_db) and not database.is_configured():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="DATABASE_URL not configured"
        )

    if meta is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action")

    logger.info(f"Action: {action_kind.value}")

    try:
        payload = meta.payload_model.model_validate(await _read_body(request))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_validation_message(e))

    try:
        if not meta.needs_db:
            return await meta.handler(payload, None)

        async with database.async_session_maker() as session:
            try:
                return await meta.handler(payload, session)
            except SQLAlchemyError:
                await session.rollback()
                raise

    except ActionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    except SQLAlchemyError as e:
        logger.error(f"Database error in {action_kind.value}: {e}")
        message = str(getattr(e, "orig", None) or e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)
