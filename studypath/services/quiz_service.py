# studypath/services/quiz_service.py
"""
Фасад работы с тестами StudyPath
Однократная инициализация хранилища, заполнение примерами и учёт прогресса
поверх прямого SQL-слоя
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from studypath.progress import fold_score, summarize_progress
from studypath.seed import seed_database

logger = logging.getLogger(__name__)

# Ключ статистики -> таблица
STATS_TABLES = {
    'quiz_count': 'quizzes',
    'question_count': 'questions',
    'attempt_count': 'quizAttempts',
    'progress_count': 'userProgress',
}


class QuizService:
    """
    Фасад над QuizDatabase

    Любой публичный метод сначала вызывает initialize(); схема создаётся
    и мигрируется только при первом вызове.

    Attributes:
        database (QuizDatabase): Прямой слой доступа
        atomic_progress (bool): Учитывать результаты одним upsert-запросом
        stats_workers (int): Число потоков для подсчёта строк
    """

    def __init__(self, database, atomic_progress=True, stats_workers=4):
        self.database = database
        self.atomic_progress = atomic_progress
        self.stats_workers = stats_workers
        self._initialized = False
        self._init_lock = threading.Lock()

    @property
    def initialized(self):
        return self._initialized

    def initialize(self):
        """Создание таблиц и миграция схемы (повторные вызовы ничего не делают)"""
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            self.database.initialize()
            self.database.run_migrations()
            self._initialized = True
            logger.info("Сервис тестов инициализирован")

    # === Тесты и вопросы ===

    def create_quiz(self, title, subject, difficulty, time_limit, question_count, description=None):
        self.initialize()
        return self.database.create_quiz(
            title=title, subject=subject, difficulty=difficulty,
            time_limit=time_limit, question_count=question_count, description=description,
        )

    def add_question(self, quiz_id, question, option_a, option_b, option_c, option_d,
                     correct_answer, question_order, explanation=None):
        self.initialize()
        return self.database.add_question(
            quiz_id=quiz_id, question=question,
            option_a=option_a, option_b=option_b, option_c=option_c, option_d=option_d,
            correct_answer=correct_answer, question_order=question_order, explanation=explanation,
        )

    def get_quizzes_by_subject(self, subject):
        self.initialize()
        return self.database.get_quizzes_by_subject(subject)

    def get_quiz_with_questions(self, quiz_id):
        self.initialize()
        return self.database.get_quiz_with_questions(quiz_id)

    # === Попытки и прогресс ===

    def save_quiz_attempt(self, quiz_id, user_id, score, time_taken, answers):
        self.initialize()
        return self.database.save_quiz_attempt(
            quiz_id=quiz_id, user_id=user_id, score=score, time_taken=time_taken, answers=answers,
        )

    def get_user_progress(self, user_id, subject):
        self.initialize()
        return self.database.get_user_progress(user_id, subject)

    def update_user_progress(self, user_id, subject, **fields):
        self.initialize()
        self.database.update_user_progress(user_id, subject, **fields)

    def calculate_and_update_progress(self, user_id, subject, new_score):
        """
        Учёт нового результата в прогрессе пользователя по предмету

        При atomic_progress=False повторяет исходное поведение: чтение и запись
        двумя запросами, параллельные вызовы могут потерять одно из обновлений.

        Args:
            user_id (str): Внешний идентификатор пользователя
            subject (str): Предмет
            new_score (int): Результат теста в процентах
        """
        self.initialize()
        if self.atomic_progress:
            self.database.upsert_progress_score(user_id, subject, new_score)
            return

        current = self.get_user_progress(user_id, subject)
        self.update_user_progress(user_id, subject, **fold_score(current, new_score))

    def get_quiz_stats(self, user_id, subject):
        self.initialize()
        return summarize_progress(self.get_user_progress(user_id, subject))

    # === Служебные операции ===

    def clear_all_data(self):
        self.initialize()
        self.database.clear_all_data()

    def create_sample_quizzes(self):
        """
        Очистка базы и заполнение примерами тестов по четырём предметам

        Returns:
            dict: success, message и ID созданных тестов по предметам
        """
        self.initialize()
        try:
            result = seed_database(self.database)
        except Exception as e:
            logger.error(f"Ошибка создания примеров тестов: {e}")
            raise
        logger.info(f"Примеры тестов созданы: {result['message']}")
        return result

    def get_database_stats(self):
        """
        Количество строк в каждой таблице

        Четыре независимых запроса COUNT выполняются параллельно.
        """
        self.initialize()
        with ThreadPoolExecutor(max_workers=self.stats_workers) as executor:
            futures = {
                key: executor.submit(self.database.count_rows, table)
                for key, table in STATS_TABLES.items()
            }
            return {key: future.result() for key, future in futures.items()}

    def describe_tables(self):
        self.initialize()
        return self.database.describe_tables()

    def get_all_quizzes(self):
        self.initialize()
        return self.database.get_all_quizzes()

    def get_all_questions(self):
        self.initialize()
        return self.database.get_all_questions()

    def get_all_attempts(self):
        self.initialize()
        return self.database.get_all_attempts()

    def get_all_progress(self):
        self.initialize()
        return self.database.get_all_progress()
