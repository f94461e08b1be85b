# studypath/database.py
"""
Прямой слой доступа к локальной базе данных StudyPath
Параметризованные SQL-запросы поверх sqlite3 для тестов, вопросов, попыток и прогресса
"""
import json
import logging
import os
import sqlite3
from contextlib import contextmanager

from studypath.exceptions import QuizNotFoundError
from studypath.migrations import run_migrations
from studypath.schema import (TABLES, column_to_key, create_tables, describe_tables,
                              validate_correct_answer, validate_difficulty)

logger = logging.getLogger(__name__)

# Поля прогресса: ключ словаря -> колонка таблицы userProgress
PROGRESS_COLUMNS = {
    'total_quizzes': 'totalQuizzes',
    'completed_quizzes': 'completedQuizzes',
    'total_score': 'totalScore',
    'average_score': 'averageScore',
}


def row_to_dict(row):
    """Строка sqlite3.Row -> словарь с ключами в snake_case"""
    if row is None:
        return None
    return {column_to_key(key): row[key] for key in row.keys()}


class QuizDatabase:
    """
    Обёртка над файлом SQLite с ручными SQL-запросами

    Каждая операция открывает собственное соединение, поэтому один объект
    можно использовать из нескольких потоков.

    Attributes:
        path (str): Путь к файлу базы данных
    """

    def __init__(self, path):
        self.path = path

    def __repr__(self):
        return f'<QuizDatabase {self.path}>'

    @contextmanager
    def connect(self):
        """
        Соединение с базой: commit при успехе, rollback при ошибке, всегда close
        """
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # === Схема ===

    def initialize(self):
        """
        Создание таблиц, если их нет. Ошибка создания фатальна и передаётся вызывающему.
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        try:
            with self.connect() as conn:
                create_tables(conn)
        except sqlite3.Error as e:
            logger.error(f"Ошибка инициализации базы данных: {e}")
            raise
        logger.info(f"База данных инициализирована: {self.path}")

    def run_migrations(self):
        """
        Добавление колонок isImported/importedFromPostId, если их нет

        Returns:
            list: Имена добавленных колонок
        """
        with self.connect() as conn:
            return run_migrations(conn)

    def describe_tables(self):
        with self.connect() as conn:
            return describe_tables(conn)

    # === Тесты и вопросы ===

    def create_quiz(self, title, subject, difficulty, time_limit, question_count, description=None):
        """
        Создание теста

        Args:
            title (str): Название теста
            subject (str): Предмет
            difficulty (str): 'Beginner', 'Intermediate' или 'Advanced'
            time_limit (int): Ограничение времени в минутах
            question_count (int): Заявленное количество вопросов
            description (str): Описание теста

        Returns:
            int: ID созданного теста
        """
        validate_difficulty(difficulty)
        try:
            with self.connect() as conn:
                cursor = conn.execute(
                    """INSERT INTO quizzes (title, description, subject, difficulty, timeLimit, questionCount)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (title, description or "", subject, difficulty, time_limit, question_count),
                )
                return cursor.lastrowid
        except sqlite3.Error as e:
            logger.error(f"Ошибка создания теста: {e}")
            raise

    def add_question(self, quiz_id, question, option_a, option_b, option_c, option_d,
                     correct_answer, question_order, explanation=None):
        """
        Добавление вопроса к тесту

        Returns:
            int: ID созданного вопроса
        """
        validate_correct_answer(correct_answer)
        try:
            with self.connect() as conn:
                cursor = conn.execute(
                    """INSERT INTO questions (quizId, question, optionA, optionB, optionC, optionD,
                                              correctAnswer, explanation, questionOrder)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (quiz_id, question, option_a, option_b, option_c, option_d,
                     correct_answer, explanation or "", question_order),
                )
                return cursor.lastrowid
        except sqlite3.Error as e:
            logger.error(f"Ошибка добавления вопроса: {e}")
            raise

    def get_quizzes_by_subject(self, subject):
        """Тесты предмета, новые первыми"""
        try:
            with self.connect() as conn:
                rows = conn.execute(
                    "SELECT * FROM quizzes WHERE subject = ? ORDER BY createdAt DESC, id DESC",
                    (subject,),
                ).fetchall()
            return [row_to_dict(row) for row in rows]
        except sqlite3.Error as e:
            logger.error(f"Ошибка получения тестов по предмету: {e}")
            raise

    def get_quiz_with_questions(self, quiz_id):
        """
        Тест вместе с вопросами в порядке questionOrder

        Raises:
            QuizNotFoundError: Если теста с таким ID нет
        """
        try:
            with self.connect() as conn:
                quiz = conn.execute("SELECT * FROM quizzes WHERE id = ?", (quiz_id,)).fetchone()
                if quiz is None:
                    raise QuizNotFoundError(quiz_id)
                questions = conn.execute(
                    "SELECT * FROM questions WHERE quizId = ? ORDER BY questionOrder, id",
                    (quiz_id,),
                ).fetchall()
        except (sqlite3.Error, QuizNotFoundError) as e:
            logger.error(f"Ошибка получения теста {quiz_id} с вопросами: {e}")
            raise

        result = row_to_dict(quiz)
        result['questions'] = [row_to_dict(row) for row in questions]
        return result

    def delete_quiz(self, quiz_id):
        """Удаление теста; вопросы и попытки удаляются каскадно"""
        try:
            with self.connect() as conn:
                cursor = conn.execute("DELETE FROM quizzes WHERE id = ?", (quiz_id,))
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Ошибка удаления теста {quiz_id}: {e}")
            raise

    # === Попытки ===

    def save_quiz_attempt(self, quiz_id, user_id, score, time_taken, answers):
        """
        Сохранение попытки прохождения теста (попытки не изменяются)

        Args:
            quiz_id (int): ID теста
            user_id (str): Внешний идентификатор пользователя
            score (int): Результат в процентах (0-100)
            time_taken (int): Время прохождения в секундах
            answers: Список индексов выбранных вариантов или готовая JSON-строка

        Returns:
            int: ID попытки
        """
        if not isinstance(answers, str):
            answers = json.dumps(answers)
        try:
            with self.connect() as conn:
                cursor = conn.execute(
                    """INSERT INTO quizAttempts (quizId, userId, score, timeTaken, answers)
                       VALUES (?, ?, ?, ?, ?)""",
                    (quiz_id, user_id, score, time_taken, answers),
                )
                return cursor.lastrowid
        except sqlite3.Error as e:
            logger.error(f"Ошибка сохранения попытки: {e}")
            raise

    # === Прогресс ===

    def get_user_progress(self, user_id, subject):
        try:
            with self.connect() as conn:
                row = conn.execute(
                    "SELECT * FROM userProgress WHERE userId = ? AND subject = ?",
                    (user_id, subject),
                ).fetchone()
            return row_to_dict(row)
        except sqlite3.Error as e:
            logger.error(f"Ошибка получения прогресса пользователя: {e}")
            raise

    def update_user_progress(self, user_id, subject, **fields):
        """
        Обновление прогресса с наложением переданных полей на существующую запись

        Чтение и запись выполняются двумя отдельными запросами без транзакции.
        Поля со значением None считаются не переданными. Для новой записи
        непереданные счётчики равны 0.

        Args:
            user_id (str): Внешний идентификатор пользователя
            subject (str): Предмет
            **fields: total_quizzes, completed_quizzes, total_score, average_score
        """
        unknown = set(fields) - set(PROGRESS_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown progress fields: {', '.join(sorted(unknown))}")

        try:
            existing = self.get_user_progress(user_id, subject)

            with self.connect() as conn:
                if existing:
                    merged = {
                        key: fields[key] if fields.get(key) is not None else existing[key]
                        for key in PROGRESS_COLUMNS
                    }
                    conn.execute(
                        """UPDATE userProgress
                           SET totalQuizzes = ?, completedQuizzes = ?, totalScore = ?, averageScore = ?,
                               lastActivity = CURRENT_TIMESTAMP
                           WHERE userId = ? AND subject = ?""",
                        (merged['total_quizzes'], merged['completed_quizzes'],
                         merged['total_score'], merged['average_score'], user_id, subject),
                    )
                else:
                    values = {
                        key: fields[key] if fields.get(key) is not None else 0
                        for key in PROGRESS_COLUMNS
                    }
                    conn.execute(
                        """INSERT INTO userProgress (userId, subject, totalQuizzes, completedQuizzes,
                                                     totalScore, averageScore)
                           VALUES (?, ?, ?, ?, ?, ?)""",
                        (user_id, subject, values['total_quizzes'], values['completed_quizzes'],
                         values['total_score'], values['average_score']),
                    )
        except sqlite3.Error as e:
            logger.error(f"Ошибка обновления прогресса пользователя: {e}")
            raise

    def upsert_progress_score(self, user_id, subject, score):
        """
        Атомарный учёт результата теста одним запросом INSERT ... ON CONFLICT

        Арифметика совпадает с progress.fold_score, но чтение и запись
        не разделены, поэтому параллельные вызовы не теряют обновления.
        """
        try:
            with self.connect() as conn:
                conn.execute(
                    """INSERT INTO userProgress (userId, subject, totalQuizzes, completedQuizzes,
                                                 totalScore, averageScore)
                       VALUES (?, ?, 1, 1, ?, ?)
                       ON CONFLICT(userId, subject) DO UPDATE SET
                         totalScore = totalScore + excluded.totalScore,
                         completedQuizzes = completedQuizzes + 1,
                         averageScore = CAST(totalScore + excluded.totalScore AS REAL) / (completedQuizzes + 1),
                         lastActivity = CURRENT_TIMESTAMP""",
                    (user_id, subject, score, score),
                )
        except sqlite3.Error as e:
            logger.error(f"Ошибка атомарного обновления прогресса: {e}")
            raise

    # === Служебные операции ===

    def clear_all_data(self):
        """Удаление всех строк из всех таблиц (для тестов и повторного заполнения)"""
        try:
            with self.connect() as conn:
                for table in TABLES:
                    conn.execute(f"DELETE FROM {table}")
        except sqlite3.Error as e:
            logger.error(f"Ошибка очистки данных: {e}")
            raise
        logger.info("Все данные удалены")

    def count_rows(self, table):
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table!r}")
        with self.connect() as conn:
            return conn.execute(f"SELECT COUNT(*) AS count FROM {table}").fetchone()['count']

    def get_table_info(self):
        """Вывод в лог количества тестов, вопросов и попыток"""
        try:
            counts = {table: self.count_rows(table) for table in ('quizzes', 'questions', 'quizAttempts')}
        except sqlite3.Error as e:
            logger.error(f"Ошибка получения информации о таблицах: {e}")
            return None
        logger.info(
            f"Состояние базы: тестов {counts['quizzes']}, вопросов {counts['questions']}, "
            f"попыток {counts['quizAttempts']}"
        )
        return counts

    # === Просмотр таблиц для диагностики (ошибки не пробрасываются) ===

    def _select_all(self, sql, description):
        try:
            with self.connect() as conn:
                rows = conn.execute(sql).fetchall()
            return [row_to_dict(row) for row in rows]
        except sqlite3.Error as e:
            logger.error(f"Ошибка получения {description}: {e}")
            return []

    def get_all_quizzes(self):
        return self._select_all("SELECT * FROM quizzes ORDER BY createdAt DESC, id DESC", "тестов")

    def get_all_questions(self):
        return self._select_all("SELECT * FROM questions ORDER BY quizId, questionOrder", "вопросов")

    def get_all_attempts(self):
        return self._select_all("SELECT * FROM quizAttempts ORDER BY completedAt DESC, id DESC", "попыток")

    def get_all_progress(self):
        return self._select_all("SELECT * FROM userProgress ORDER BY lastActivity DESC, id DESC", "прогресса")
