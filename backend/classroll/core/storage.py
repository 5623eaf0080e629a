"""
Файловое хранилище студентов
Один JSON-файл на класс в директории данных
"""

import os
import re
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import Request


logger = logging.getLogger(__name__)

UNKNOWN_CLASS = "unknown"

_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_CHARS_RE = re.compile(r"[^a-z0-9_]")


class StorageError(Exception):
    """Ошибка чтения/записи файла класса"""


def sanitize_class_name(name: Any = "") -> str:
    """
    Преобразовать название класса в имя файла.

    "Grade 5" -> "grade_5". Разные названия могут дать одно имя файла,
    такие классы делят один файл.
    """
    if name is None:
        name = ""
    value = _WHITESPACE_RE.sub("_", str(name).lower())
    return _INVALID_CHARS_RE.sub("", value)


class ClassFileStore:
    """
    Хранилище записей студентов.

    Каждый класс хранится в отдельном файле ``<data_dir>/<sanitized>.json``
    как JSON-массив. Чтение-изменение-запись одного файла выполняется
    под блокировкой этого файла.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

        logger.info(f"Хранилище данных: {self.data_dir}")

    # ----- Файлы -----

    def ensure_data_dir(self) -> None:
        """Создать директорию данных если её нет"""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Не удалось создать {self.data_dir}: {e}") from e

    def class_file(self, class_name: Any) -> Path:
        """Путь к файлу класса"""
        file_name = sanitize_class_name(class_name) or UNKNOWN_CLASS
        return self.data_dir / f"{file_name}.json"

    def list_class_files(self) -> List[Path]:
        """Все файлы классов в порядке имён"""
        self.ensure_data_dir()
        try:
            return sorted(
                path for path in self.data_dir.iterdir()
                if path.suffix == ".json" and path.is_file()
            )
        except OSError as e:
            raise StorageError(f"Не удалось прочитать {self.data_dir}: {e}") from e

    def _lock_for(self, path: Path) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(path.name)
            if lock is None:
                lock = self._locks[path.name] = threading.Lock()
            return lock

    def _load(self, path: Path) -> List[Dict[str, Any]]:
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"Не удалось прочитать {path}: {e}") from e

        if not content.strip():
            return []

        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"Некорректный JSON в {path}: {e}") from e

        if not isinstance(records, list):
            raise StorageError(f"{path} должен содержать JSON-массив")
        return records

    def _save(self, path: Path, records: List[Dict[str, Any]]) -> None:
        self.ensure_data_dir()
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Не удалось записать {path}: {e}") from e

    # ----- Примитивы -----

    def read(self, class_name: Any) -> List[Dict[str, Any]]:
        """Записи одного класса (пустой список если файла нет)"""
        path = self.class_file(class_name)
        with self._lock_for(path):
            return self._load(path)

    def write_all(self, class_name: Any, records: List[Dict[str, Any]]) -> None:
        """Перезаписать файл класса целиком"""
        path = self.class_file(class_name)
        with self._lock_for(path):
            self._save(path, records)

    def read_all(self) -> List[Dict[str, Any]]:
        """Записи всех классов подряд, файл за файлом"""
        students: List[Dict[str, Any]] = []
        for path in self.list_class_files():
            with self._lock_for(path):
                students.extend(self._load(path))
        return students

    def list_classes(self) -> List[str]:
        """Уникальные непустые названия классов"""
        classes: List[str] = []
        for student in self.read_all():
            class_name = student.get("class") if isinstance(student, dict) else None
            if class_name and class_name not in classes:
                classes.append(class_name)
        return classes

    # ----- Операции над записями -----

    def add(self, student: Dict[str, Any]) -> Dict[str, Any]:
        """Добавить запись в конец файла её класса"""
        path = self.class_file(student.get("class"))
        with self._lock_for(path):
            students = self._load(path)
            students.append(student)
            self._save(path, students)
        return student

    def add_if_absent(self, class_name: Any, student: Dict[str, Any]) -> bool:
        """Добавить запись в класс, если там ещё нет записи с таким id"""
        path = self.class_file(class_name)
        with self._lock_for(path):
            students = self._load(path)
            if any(s.get("id") == student.get("id") for s in students if isinstance(s, dict)):
                return False
            students.append(student)
            self._save(path, students)
        return True

    def delete(self, student_id: str) -> bool:
        """
        Удалить запись по id.

        Файлы просматриваются по очереди, перезаписывается только первый
        файл, в котором нашлась запись.
        """
        for path in self.list_class_files():
            with self._lock_for(path):
                students = self._load(path)
                remaining = [s for s in students if not _has_id(s, student_id)]
                if len(remaining) != len(students):
                    self._save(path, remaining)
                    logger.info(f"Студент {student_id} удалён из {path.name}")
                    return True
        return False

    def update(self, student_id: str, name: Any, class_name: str, grade: Any) -> Optional[Dict[str, Any]]:
        """
        Обновить запись по id.

        Если класс изменился, запись переносится в конец файла нового класса.
        Иначе поля обновляются на месте. None если запись не найдена.
        """
        for path in self.list_class_files():
            with self._lock_for(path):
                students = self._load(path)
                index = next(
                    (i for i, s in enumerate(students) if _has_id(s, student_id)),
                    None,
                )
                if index is None:
                    continue

                student = students[index]
                if (student.get("class") or "") == class_name:
                    student["name"] = name
                    student["class"] = class_name
                    student["grade"] = grade
                    self._save(path, students)
                    return student

                del students[index]
                self._save(path, students)

            # Перенос: блокировка исходного файла уже снята
            moved = {**student, "name": name, "class": class_name, "grade": grade}
            self.add(moved)
            logger.info(f"Студент {student_id} перенесён из {path.name} в {self.class_file(class_name).name}")
            return moved

        return None


def _has_id(student: Any, student_id: str) -> bool:
    return isinstance(student, dict) and student.get("id") == student_id


# Dependency для FastAPI endpoints
def get_store(request: Request) -> ClassFileStore:
    """
    Хранилище, созданное при старте приложения.

    Usage:
        @router.get("/items")
        def get_items(store: ClassFileStore = Depends(get_store)):
            ...
    """
    return request.app.state.store
