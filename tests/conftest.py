# tests/conftest.py
"""
Общие фикстуры: приложение с временным файлом базы данных
"""
import sqlite3

import pytest

from config import Config
from studypath import create_app, db, get_orm_quiz_service

# Таблица quizzes в том виде, в каком она была до колонок импорта
LEGACY_QUIZZES = """
CREATE TABLE quizzes (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  title TEXT NOT NULL,
  description TEXT,
  subject TEXT NOT NULL,
  difficulty TEXT NOT NULL,
  timeLimit INTEGER NOT NULL,
  questionCount INTEGER NOT NULL,
  createdAt TEXT DEFAULT CURRENT_TIMESTAMP,
  updatedAt TEXT DEFAULT CURRENT_TIMESTAMP
)
"""


class FailingAlterConnection:
    """Обёртка DB-API соединения, на которой ALTER TABLE завершается ошибкой"""

    def __init__(self, connection):
        self._connection = connection

    def execute(self, sql, *args):
        if sql.lstrip().upper().startswith('ALTER TABLE'):
            raise sqlite3.OperationalError('attempt to write a readonly database')
        return self._connection.execute(sql, *args)

    def __getattr__(self, name):
        return getattr(self._connection, name)


def restore_legacy_quizzes(path):
    """Пересоздание пустой таблицы quizzes без колонок импорта"""
    conn = sqlite3.connect(path)
    try:
        conn.execute("DROP TABLE quizzes")
        conn.execute(LEGACY_QUIZZES)
        conn.commit()
    finally:
        conn.close()


@pytest.fixture
def app(tmp_path):
    class TestingConfig(Config):
        TESTING = True
        DATABASE_PATH = str(tmp_path / 'studypath.db')
        ENABLE_DEBUG_VIEWS = True
        LOG_LEVEL = 'DEBUG'

    app = create_app(TestingConfig)
    yield app

    with app.app_context():
        db.engine.dispose()


@pytest.fixture
def service(app):
    return app.extensions['studypath']


@pytest.fixture
def database(service):
    return service.database


@pytest.fixture
def orm_service(app):
    with app.app_context():
        yield get_orm_quiz_service()


@pytest.fixture
def client(app):
    return app.test_client()


def make_quiz(service, title='Basic Calculus', subject='Mathematics', question_count=5):
    return service.create_quiz(
        title=title,
        subject=subject,
        difficulty='Intermediate',
        time_limit=20,
        question_count=question_count,
        description='Derivatives and integrals',
    )


def add_question(service, quiz_id, order, text=None):
    return service.add_question(
        quiz_id=quiz_id,
        question=text or f'Question {order}',
        option_a='a',
        option_b='b',
        option_c='c',
        option_d='d',
        correct_answer='A',
        question_order=order,
    )
