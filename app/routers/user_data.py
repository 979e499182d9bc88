"""Route for wiping all of the caller's stored data."""
import logging
from typing import Annotated

import psycopg2
from fastapi import APIRouter, Depends

from app.auth import get_current_user_dependency
from app.models.schemas import DataDeletionResponse
from app.repositories.user_data import UserDataRepository
from app.utils.exceptions import DatabaseError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/data", tags=["user-data"])

CurrentUser = Annotated[dict, Depends(get_current_user_dependency)]


@router.delete("/all", response_model=DataDeletionResponse)
async def delete_all_user_data(current_user: CurrentUser):
    """Delete every bookmark, highlight, note, progress entry, topic and owned plan."""
    user_id = current_user["id"]
    try:
        counts = UserDataRepository.delete_all_for_user(user_id)
    except psycopg2.Error as exc:
        logger.error(f"Database error deleting data for user {user_id}: {exc}")
        raise DatabaseError("Failed to delete user data") from exc
    logger.info(f"Deleted all data for user {user_id}: {counts}")
    return counts
