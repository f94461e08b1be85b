# studypath/__init__.py
"""
Инициализация Flask-приложения StudyPath
Создание экземпляра приложения, инициализация расширений и локального хранилища тестов
"""
import sqlite3

from flask import Flask, current_app, request
from flask_babel import Babel
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

from config import Config

# Инициализация расширений Flask (до create_app)
db = SQLAlchemy()
babel = Babel()

EXTENSION_KEY = 'studypath'
ORM_EXTENSION_KEY = 'studypath_orm'


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    # === Включение внешних ключей для SQLite ===
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_app(config_class=Config):
    """
    Создание и настройка экземпляра Flask-приложения

    Хранилище открывается один раз: фасад QuizService создаётся здесь,
    инициализирует схему и сохраняется в app.extensions.

    Args:
        config_class: Класс конфигурации приложения

    Returns:
        app: Настроенный экземпляр Flask-приложения
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Слой SQLAlchemy работает с тем же файлом, что и прямой SQL-слой
    app.config.setdefault('SQLALCHEMY_DATABASE_URI', f"sqlite:///{app.config['DATABASE_PATH']}")

    # Инициализация расширений
    db.init_app(app)

    def get_locale():
        return request.accept_languages.best_match(list(app.config.get('LANGUAGES', {}).keys()))

    babel.init_app(app, locale_selector=get_locale)

    # === Инициализация хранилища ===
    from studypath.database import QuizDatabase
    from studypath.services.orm_quiz_service import OrmQuizService
    from studypath.services.quiz_service import QuizService

    service = QuizService(
        QuizDatabase(app.config['DATABASE_PATH']),
        atomic_progress=app.config.get('ATOMIC_PROGRESS_UPDATES', True),
        stats_workers=app.config.get('STATS_MAX_WORKERS', 4),
    )
    service.initialize()
    app.extensions[EXTENSION_KEY] = service
    # Сервис на SQLAlchemy инициализируется лениво: ему нужен контекст приложения
    app.extensions[ORM_EXTENSION_KEY] = OrmQuizService(
        atomic_progress=app.config.get('ATOMIC_PROGRESS_UPDATES', True),
        stats_workers=app.config.get('STATS_MAX_WORKERS', 4),
    )

    # === Регистрация Blueprints ===
    if app.config.get('ENABLE_DEBUG_VIEWS'):
        from studypath.routes.debug import bp as debug_bp
        app.register_blueprint(debug_bp, url_prefix='/debug')

    app.logger.info(f"{app.config.get('APP_NAME', 'StudyPath')} запущен, база данных: {app.config['DATABASE_PATH']}")
    return app


def get_quiz_service():
    """Фасад QuizService текущего приложения"""
    return current_app.extensions[EXTENSION_KEY]


def get_orm_quiz_service():
    """Сервис OrmQuizService текущего приложения"""
    return current_app.extensions[ORM_EXTENSION_KEY]
