# studypath/schema.py
"""
Схема локального хранилища StudyPath
Единственное описание таблиц для прямого SQL-слоя и слоя SQLAlchemy
"""
import logging
import re

logger = logging.getLogger(__name__)

DIFFICULTIES = ('Beginner', 'Intermediate', 'Advanced')
ANSWER_OPTIONS = ('A', 'B', 'C', 'D')

# Порядок важен для очистки: попытки и вопросы удаляются раньше тестов
TABLES = ('quizAttempts', 'questions', 'quizzes', 'userProgress')

SCHEMA = """
CREATE TABLE IF NOT EXISTS quizzes (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  title TEXT NOT NULL,
  description TEXT,
  subject TEXT NOT NULL,
  difficulty TEXT NOT NULL,
  timeLimit INTEGER NOT NULL,
  questionCount INTEGER NOT NULL,
  createdAt TEXT DEFAULT CURRENT_TIMESTAMP,
  updatedAt TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS questions (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  quizId INTEGER NOT NULL,
  question TEXT NOT NULL,
  optionA TEXT NOT NULL,
  optionB TEXT NOT NULL,
  optionC TEXT NOT NULL,
  optionD TEXT NOT NULL,
  correctAnswer TEXT NOT NULL,
  explanation TEXT,
  questionOrder INTEGER NOT NULL,
  FOREIGN KEY (quizId) REFERENCES quizzes(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS quizAttempts (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  quizId INTEGER NOT NULL,
  userId TEXT NOT NULL,
  score INTEGER NOT NULL,
  timeTaken INTEGER NOT NULL,
  completedAt TEXT DEFAULT CURRENT_TIMESTAMP,
  answers TEXT NOT NULL,
  FOREIGN KEY (quizId) REFERENCES quizzes(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS userProgress (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  userId TEXT NOT NULL,
  subject TEXT NOT NULL,
  totalQuizzes INTEGER DEFAULT 0,
  completedQuizzes INTEGER DEFAULT 0,
  totalScore INTEGER DEFAULT 0,
  averageScore REAL DEFAULT 0,
  lastActivity TEXT DEFAULT CURRENT_TIMESTAMP,
  UNIQUE(userId, subject)
);
"""


def validate_difficulty(difficulty):
    """Проверка уровня сложности перед записью (при чтении любые значения допустимы)"""
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Unsupported difficulty: {difficulty!r}")
    return difficulty


def validate_correct_answer(correct_answer):
    if correct_answer not in ANSWER_OPTIONS:
        raise ValueError(f"Unsupported correct answer: {correct_answer!r}")
    return correct_answer


_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def column_to_key(column):
    """
    Преобразование имени колонки в ключ словаря ('quizId' -> 'quiz_id')

    Args:
        column (str): Имя колонки в таблице

    Returns:
        str: Имя в snake_case
    """
    return _CAMEL_BOUNDARY.sub('_', column).lower()


def create_tables(connection):
    """
    Создание всех таблиц, если они отсутствуют (повторный вызов безопасен)

    Args:
        connection: DB-API соединение sqlite3 (в том числе из пула SQLAlchemy)
    """
    cursor = connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode = WAL")
        cursor.executescript(SCHEMA)
    finally:
        cursor.close()
    connection.commit()
    logger.info("Таблицы базы данных проверены/созданы")


def describe_tables(connection):
    """
    Список колонок каждой таблицы хранилища

    Returns:
        dict: {имя таблицы: [имена колонок]} только для существующих таблиц
    """
    tables = {}
    for table in ('quizzes', 'questions', 'quizAttempts', 'userProgress'):
        rows = connection.execute(f"PRAGMA table_info({table})").fetchall()
        if rows:
            tables[table] = [row[1] for row in rows]
    return tables
