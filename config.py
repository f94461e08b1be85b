# config.py
import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Базовый класс конфигурации приложения"""

    # Название приложения
    APP_NAME = 'StudyPath'

    # Настройки базы данных (один файл для обоих слоёв доступа)
    DATABASE_PATH = os.environ.get('STUDYPATH_DB') or os.path.join(BASE_DIR, 'instance', 'studypath.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Прогресс пользователя: атомарный upsert вместо чтения и записи двумя запросами
    ATOMIC_PROGRESS_UPDATES = True

    # Количество потоков для параллельных запросов статистики
    STATS_MAX_WORKERS = 4

    # Диагностические маршруты /debug (без авторизации)
    ENABLE_DEBUG_VIEWS = _env_flag('STUDYPATH_DEBUG_VIEWS', False)

    # Логирование
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Указываем путь к каталогу с переводами
    BABEL_TRANSLATION_DIRECTORIES = os.path.join(BASE_DIR, 'translations')
    BABEL_DEFAULT_LOCALE = 'en'  # Язык по умолчанию
    BABEL_DEFAULT_TIMEZONE = 'UTC'
    # Поддерживаемые языки
    LANGUAGES = {
        'en': 'English',
        'ru': 'Русский'
    }
