"""
Students API endpoints
CRUD операции для студентов
"""

import uuid
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from classroll.core.storage import ClassFileStore, StorageError, get_store
from classroll.schemas.student import DeleteResult, ErrorResponse, Student, StudentIn

router = APIRouter()

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_DETAIL = "name, class and grade are required"
NOT_FOUND_DETAIL = "Student not found"

READ_ERRORS = {500: {"model": ErrorResponse}}
WRITE_ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _require_fields(student_in: StudentIn) -> None:
    if not student_in.is_complete():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=REQUIRED_FIELDS_DETAIL
        )


@router.get(
    "",
    response_model=List[Student],
    response_model_exclude_unset=True,
    responses=READ_ERRORS
)
def get_students(
    class_name: Optional[str] = Query(None, alias="class"),
    store: ClassFileStore = Depends(get_store)
):
    """
    Получить список студентов.

    С параметром ``class`` возвращает только этот класс, иначе все классы.
    """
    try:
        if class_name:
            return store.read(class_name)
        return store.read_all()
    except StorageError:
        logger.exception("Ошибка чтения студентов")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read students"
        )


@router.post(
    "",
    response_model=Student,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_ERRORS
)
def create_student(
    student_in: StudentIn,
    store: ClassFileStore = Depends(get_store)
):
    """Создать студента в файле его класса"""
    _require_fields(student_in)

    student = {
        "id": str(uuid.uuid4()),
        "name": student_in.name,
        "class": student_in.class_,
        "grade": student_in.grade,
    }

    try:
        store.add(student)
    except StorageError:
        logger.exception("Ошибка добавления студента")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add student"
        )

    logger.info(f"Студент {student['id']} добавлен в класс {student['class']!r}")
    return student


@router.delete(
    "/{student_id}",
    response_model=DeleteResult,
    responses={404: {"model": ErrorResponse}, **READ_ERRORS}
)
def delete_student(
    student_id: str,
    store: ClassFileStore = Depends(get_store)
):
    """Удалить студента (поиск по всем классам)"""
    try:
        deleted = store.delete(student_id)
    except StorageError:
        logger.exception("Ошибка удаления студента")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete student"
        )

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_DETAIL
        )

    return DeleteResult(success=True)


@router.put(
    "/{student_id}",
    response_model=Student,
    response_model_exclude_unset=True,
    responses={404: {"model": ErrorResponse}, **WRITE_ERRORS}
)
def update_student(
    student_id: str,
    student_in: StudentIn,
    store: ClassFileStore = Depends(get_store)
):
    """
    Обновить данные студента.

    Если класс изменился, запись переносится в файл нового класса.
    """
    _require_fields(student_in)

    try:
        student = store.update(
            student_id,
            name=student_in.name,
            class_name=student_in.class_,
            grade=student_in.grade,
        )
    except StorageError:
        logger.exception("Ошибка обновления студента")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update student"
        )

    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_DETAIL
        )

    return student
