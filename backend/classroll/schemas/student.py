"""
Pydantic schemas для Student
"""

from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


Grade = Union[str, int, float]


# Request schema (create/update)
class StudentIn(BaseModel):
    """
    Данные студента из запроса.

    Поля необязательны на уровне схемы: отсутствие или пустое значение
    проверяется в endpoint'е и даёт 400.
    """
    name: Optional[str] = None
    class_: Optional[str] = Field(None, alias="class")
    grade: Optional[Grade] = None

    model_config = ConfigDict(populate_by_name=True)

    def is_complete(self) -> bool:
        """Все обязательные поля заданы и не пустые"""
        return bool(self.name and self.class_ and self.grade)


# Response schema
class Student(BaseModel):
    """Студент (для API ответов)"""
    id: Any = None
    name: Any = None
    class_: Any = Field(None, alias="class")
    grade: Any = None

    # Записи из старого students.json могут содержать дополнительные поля
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class DeleteResult(BaseModel):
    """Результат удаления"""
    success: bool = True


class ErrorResponse(BaseModel):
    """Тело ответа с ошибкой"""
    error: str
