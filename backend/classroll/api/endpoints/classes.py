"""
Classes API endpoints
"""

import logging
from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException, status

from classroll.core.storage import ClassFileStore, StorageError, get_store
from classroll.schemas.student import ErrorResponse

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=List[Any],
    responses={500: {"model": ErrorResponse}}
)
def get_classes(store: ClassFileStore = Depends(get_store)):
    """
    Получить список классов, в которых есть студенты.

    Значения отдаются как хранятся: в старых записях класс бывает числом.
    """
    try:
        return store.list_classes()
    except StorageError:
        logger.exception("Ошибка чтения классов")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read classes"
        )
