# studypath/migrations.py
"""
Миграции схемы локального хранилища
Добавляют недостающие колонки без потери данных, безопасны при повторном запуске
"""
import logging

logger = logging.getLogger(__name__)

# Колонки, добавленные к таблице quizzes после первой версии схемы
QUIZ_COLUMNS = (
    ('isImported', 'INTEGER DEFAULT 0'),
    ('importedFromPostId', 'TEXT'),
)


def run_migrations(connection):
    """
    Добавление отсутствующих колонок импорта в таблицу quizzes

    Args:
        connection: DB-API соединение sqlite3

    Returns:
        list: Имена добавленных колонок (пустой список, если схема актуальна)
    """
    try:
        exists = connection.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='quizzes'"
        ).fetchone()
        if not exists:
            return []

        columns = {row[1] for row in connection.execute("PRAGMA table_info(quizzes)").fetchall()}
        added = []
        for name, definition in QUIZ_COLUMNS:
            if name not in columns:
                connection.execute(f"ALTER TABLE quizzes ADD COLUMN {name} {definition}")
                added.append(name)
        connection.commit()
    except Exception as e:
        logger.error(f"Ошибка миграции: {e}")
        raise

    if added:
        logger.info(f"Миграция выполнена, добавлены колонки: {', '.join(added)}")
    else:
        logger.info("Схема базы данных актуальна")
    return added
