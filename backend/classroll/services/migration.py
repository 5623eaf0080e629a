"""
Миграция старого students.json в файлы по классам
"""

import json
import logging
from pathlib import Path
from typing import Union

from classroll.core.storage import ClassFileStore, StorageError, UNKNOWN_CLASS


logger = logging.getLogger(__name__)


def migrate_legacy(store: ClassFileStore, legacy_path: Union[str, Path]) -> int:
    """
    Разложить записи из общего файла по файлам классов.

    Записи с id, уже присутствующим в файле класса, пропускаются, поэтому
    миграцию можно запускать при каждом старте. Старый файл не удаляется.
    Ошибки только логируются, старт приложения не прерывается.

    Returns:
        Количество добавленных записей
    """
    legacy_path = Path(legacy_path)
    migrated = 0

    try:
        store.ensure_data_dir()
        if not legacy_path.exists():
            return 0

        content = legacy_path.read_text(encoding="utf-8")
        students = json.loads(content or "[]")
        if not isinstance(students, list):
            raise ValueError(f"{legacy_path} должен содержать JSON-массив")

        for student in students:
            if not isinstance(student, dict):
                logger.warning(f"Пропущена некорректная запись: {student!r}")
                continue

            class_name = student.get("class") or UNKNOWN_CLASS
            if store.add_if_absent(class_name, student):
                migrated += 1

        logger.info(f"Миграция {legacy_path.name}: перенесено записей {migrated} из {len(students)}")
    except (OSError, ValueError, StorageError) as e:
        logger.error(f"Ошибка миграции: {e}")

    return migrated
