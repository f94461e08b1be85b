# studypath/models/quiz.py
"""
Модели теста и вопроса StudyPath
Отображают таблицы quizzes и questions, созданные studypath.schema
"""
from studypath import db
from studypath.models.base import SerializerMixin
from studypath.schema import validate_correct_answer, validate_difficulty
from sqlalchemy import Integer, Text, ForeignKey, text
from sqlalchemy.orm import validates


class Quiz(SerializerMixin, db.Model):
    """
    Модель теста

    Attributes:
        id (int): Уникальный идентификатор теста
        title (str): Название теста
        description (str): Описание теста
        subject (str): Предмет
        difficulty (str): Сложность ('Beginner', 'Intermediate', 'Advanced')
        time_limit (int): Ограничение времени в минутах
        question_count (int): Заявленное число вопросов (не сверяется с фактическим)
        created_at (str): Время создания
        updated_at (str): Время изменения
        is_imported (int): 1, если тест импортирован из ленты (добавлено миграцией)
        imported_from_post_id (str): ID поста, из которого импортирован тест
        questions (relationship): Вопросы теста (каскадное удаление)
        attempts (relationship): Попытки прохождения (каскадное удаление)
    """

    __tablename__ = 'quizzes'

    id = db.Column(Integer, primary_key=True, autoincrement=True)
    title = db.Column(Text, nullable=False)
    description = db.Column(Text)
    subject = db.Column(Text, nullable=False)
    difficulty = db.Column(Text, nullable=False)
    time_limit = db.Column('timeLimit', Integer, nullable=False)
    question_count = db.Column('questionCount', Integer, nullable=False)
    created_at = db.Column('createdAt', Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = db.Column('updatedAt', Text, server_default=text('CURRENT_TIMESTAMP'))
    is_imported = db.Column('isImported', Integer, server_default=text('0'))
    imported_from_post_id = db.Column('importedFromPostId', Text)

    questions = db.relationship(
        'Question', back_populates='quiz', order_by='Question.question_order',
        cascade='all, delete-orphan', passive_deletes=True,
    )
    attempts = db.relationship(
        'QuizAttempt', back_populates='quiz',
        cascade='all, delete-orphan', passive_deletes=True,
    )

    # Проверка только при записи: строки старых файлов читаются как есть
    @validates('difficulty')
    def check_difficulty(self, key, value):
        return validate_difficulty(value)

    def __repr__(self):
        return f'<Quiz {self.title} ({self.subject})>'


class Question(SerializerMixin, db.Model):
    """
    Модель вопроса с четырьмя вариантами ответа

    Attributes:
        quiz_id (int): ID теста (внешний ключ с ON DELETE CASCADE)
        question (str): Текст вопроса
        option_a .. option_d (str): Варианты ответа
        correct_answer (str): Буква правильного варианта ('A'-'D')
        explanation (str): Пояснение к ответу
        question_order (int): Порядок вопроса в тесте
    """

    __tablename__ = 'questions'

    id = db.Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = db.Column('quizId', Integer, ForeignKey('quizzes.id', ondelete='CASCADE'), nullable=False)
    question = db.Column(Text, nullable=False)
    option_a = db.Column('optionA', Text, nullable=False)
    option_b = db.Column('optionB', Text, nullable=False)
    option_c = db.Column('optionC', Text, nullable=False)
    option_d = db.Column('optionD', Text, nullable=False)
    correct_answer = db.Column('correctAnswer', Text, nullable=False)
    explanation = db.Column(Text)
    question_order = db.Column('questionOrder', Integer, nullable=False)

    quiz = db.relationship('Quiz', back_populates='questions')

    @validates('correct_answer')
    def check_correct_answer(self, key, value):
        return validate_correct_answer(value)

    def __repr__(self):
        return f'<Question {self.question_order}: {self.question[:50]}>'
