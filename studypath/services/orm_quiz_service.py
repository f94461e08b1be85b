# studypath/services/orm_quiz_service.py
"""
Сервис тестов на построителе запросов SQLAlchemy
Та же схема и те же операции, что и у QuizService, но через модели вместо SQL-строк.
Все методы требуют контекста приложения Flask.
"""
import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from flask import current_app
from sqlalchemy import Float, and_, cast, func
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from studypath import db
from studypath.exceptions import QuizNotFoundError
from studypath.migrations import run_migrations
from studypath.models import Question, Quiz, QuizAttempt, UserProgress
from studypath.progress import PROGRESS_FIELDS, fold_score
from studypath.schema import create_tables
from studypath.seed import ORM_SAMPLE_SUBJECTS, iter_sample_quizzes

logger = logging.getLogger(__name__)


class OrmQuizService:
    """
    Сервис тестов поверх моделей Flask-SQLAlchemy

    Отличия от QuizService: операции вставки возвращают созданную запись
    целиком, есть выборка попыток пользователя и статистика по таблицам.

    Attributes:
        atomic_progress (bool): Учитывать результаты одним upsert-запросом
        stats_workers (int): Число потоков для подсчёта строк
    """

    def __init__(self, atomic_progress=True, stats_workers=4):
        self.atomic_progress = atomic_progress
        self.stats_workers = stats_workers
        self._initialized = False
        self._init_lock = threading.Lock()

    @property
    def initialized(self):
        return self._initialized

    def initialize(self):
        """Создание таблиц общей схемы и миграция через соединение движка SQLAlchemy"""
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            connection = db.engine.raw_connection()
            try:
                create_tables(connection)
                run_migrations(connection)
            finally:
                connection.close()
            self._initialized = True
            logger.info("Сервис тестов SQLAlchemy инициализирован")

    def _commit(self, action):
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Ошибка {action}: {e}")
            raise

    def _save(self, instance, action):
        db.session.add(instance)
        self._commit(action)
        db.session.refresh(instance)
        return instance

    # === Тесты и вопросы ===

    def create_quiz(self, title, subject, difficulty, time_limit, question_count, description=None):
        """
        Создание теста

        Returns:
            Quiz: Созданная запись со значениями по умолчанию из базы
        """
        self.initialize()
        quiz = Quiz(
            title=title,
            description=description,
            subject=subject,
            difficulty=difficulty,
            time_limit=time_limit,
            question_count=question_count,
        )
        return self._save(quiz, 'создания теста')

    def get_quizzes_by_subject(self, subject):
        self.initialize()
        query = (
            db.select(Quiz)
            .where(Quiz.subject == subject)
            .order_by(Quiz.created_at.desc(), Quiz.id.desc())
        )
        return db.session.scalars(query).all()

    def get_quiz_with_questions(self, quiz_id):
        """
        Тест с вопросами (quiz.questions упорядочены по question_order)

        Raises:
            QuizNotFoundError: Если теста с таким ID нет
        """
        self.initialize()
        quiz = db.session.get(Quiz, quiz_id)
        if quiz is None:
            logger.error(f"Тест {quiz_id} не найден")
            raise QuizNotFoundError(quiz_id)
        return quiz

    def add_question(self, quiz_id, question, option_a, option_b, option_c, option_d,
                     correct_answer, question_order, explanation=None):
        self.initialize()
        record = Question(
            quiz_id=quiz_id,
            question=question,
            option_a=option_a,
            option_b=option_b,
            option_c=option_c,
            option_d=option_d,
            correct_answer=correct_answer,
            explanation=explanation,
            question_order=question_order,
        )
        return self._save(record, 'добавления вопроса')

    def get_all_questions(self):
        self.initialize()
        query = db.select(Question).order_by(Question.quiz_id, Question.question_order)
        return db.session.scalars(query).all()

    # === Попытки ===

    def save_quiz_attempt(self, quiz_id, user_id, score, time_taken, answers):
        self.initialize()
        if not isinstance(answers, str):
            answers = json.dumps(answers)
        attempt = QuizAttempt(
            quiz_id=quiz_id,
            user_id=user_id,
            score=score,
            time_taken=time_taken,
            answers=answers,
        )
        return self._save(attempt, 'сохранения попытки')

    def get_user_quiz_attempts(self, user_id, quiz_id=None):
        """
        Попытки пользователя, последние первыми

        Args:
            user_id (str): Внешний идентификатор пользователя
            quiz_id (int): Ограничение по тесту (необязательно)
        """
        self.initialize()
        condition = QuizAttempt.user_id == user_id
        if quiz_id is not None:
            condition = and_(condition, QuizAttempt.quiz_id == quiz_id)
        query = (
            db.select(QuizAttempt)
            .where(condition)
            .order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc())
        )
        return db.session.scalars(query).all()

    # === Прогресс ===

    def get_user_progress(self, user_id, subject):
        self.initialize()
        query = db.select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.subject == subject,
        )
        return db.session.scalars(query).first()

    def update_user_progress(self, user_id, subject, **fields):
        """
        Обновление прогресса: переданные поля перекрывают сохранённые

        Returns:
            UserProgress: Обновлённая или созданная запись
        """
        unknown = set(fields) - set(PROGRESS_FIELDS)
        if unknown:
            raise ValueError(f"Unknown progress fields: {', '.join(sorted(unknown))}")
        values = {key: value for key, value in fields.items() if value is not None}

        self.initialize()
        progress = self.get_user_progress(user_id, subject)
        if progress is None:
            progress = UserProgress(user_id=user_id, subject=subject, **values)
        else:
            for key, value in values.items():
                setattr(progress, key, value)
            progress.last_activity = func.current_timestamp()
        return self._save(progress, 'обновления прогресса пользователя')

    def calculate_and_update_progress(self, user_id, subject, new_score):
        """
        Учёт нового результата в прогрессе пользователя по предмету

        Returns:
            UserProgress: Запись прогресса после обновления
        """
        self.initialize()
        if not self.atomic_progress:
            current = self.get_user_progress(user_id, subject)
            snapshot = current.to_dict() if current is not None else None
            return self.update_user_progress(user_id, subject, **fold_score(snapshot, new_score))

        table = UserProgress.__table__
        stmt = sqlite_insert(table).values(
            userId=user_id,
            subject=subject,
            totalQuizzes=1,
            completedQuizzes=1,
            totalScore=new_score,
            averageScore=new_score,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.userId, table.c.subject],
            set_={
                'totalScore': table.c.totalScore + stmt.excluded.totalScore,
                'completedQuizzes': table.c.completedQuizzes + 1,
                'averageScore': cast(table.c.totalScore + stmt.excluded.totalScore, Float)
                / (table.c.completedQuizzes + 1),
                'lastActivity': func.current_timestamp(),
            },
        )
        db.session.execute(stmt)
        self._commit('атомарного обновления прогресса')
        return self.get_user_progress(user_id, subject)

    # === Служебные операции ===

    def clear_all_data(self):
        self.initialize()
        for model in (QuizAttempt, Question, Quiz, UserProgress):
            db.session.execute(db.delete(model))
        self._commit('очистки данных')
        logger.info("Все данные SQLAlchemy удалены")

    def get_database_stats(self):
        """
        Количество строк в таблицах: четыре независимых запроса COUNT
        в отдельных потоках, у каждого свой контекст приложения и сессия
        """
        self.initialize()
        app = current_app._get_current_object()

        def count(model):
            with app.app_context():
                return db.session.scalar(db.select(func.count()).select_from(model))

        models = {
            'quiz_count': Quiz,
            'question_count': Question,
            'attempt_count': QuizAttempt,
            'progress_count': UserProgress,
        }
        with ThreadPoolExecutor(max_workers=self.stats_workers) as executor:
            futures = {key: executor.submit(count, model) for key, model in models.items()}
            return {key: future.result() for key, future in futures.items()}

    def create_sample_quizzes(self):
        """
        Очистка базы и создание двух примеров тестов (математика и физика)

        Returns:
            dict: success и message
        """
        self.initialize()
        try:
            self.clear_all_data()
            for quiz_fields, questions in iter_sample_quizzes(ORM_SAMPLE_SUBJECTS):
                quiz = self.create_quiz(**quiz_fields)
                for question in questions:
                    self.add_question(quiz_id=quiz.id, **question)
        except Exception as e:
            logger.error(f"Ошибка заполнения базы примерами через SQLAlchemy: {e}")
            raise

        logger.info("Примеры тестов SQLAlchemy созданы")
        return {
            'success': True,
            'message': 'Sample quizzes created successfully with SQLAlchemy',
        }
