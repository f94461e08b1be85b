# studypath/models/attempt.py
"""
Модель попытки прохождения теста StudyPath
"""
from studypath import db
from studypath.models.base import SerializerMixin
from sqlalchemy import Integer, Text, ForeignKey, text


class QuizAttempt(SerializerMixin, db.Model):
    """
    Модель попытки (создаётся один раз и не изменяется)

    Attributes:
        quiz_id (int): ID теста (внешний ключ с ON DELETE CASCADE)
        user_id (str): Внешний идентификатор пользователя, не внешний ключ
        score (int): Результат в процентах (0-100)
        time_taken (int): Время прохождения в секундах
        completed_at (str): Время завершения
        answers (str): JSON-список индексов выбранных вариантов
    """

    __tablename__ = 'quizAttempts'

    id = db.Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = db.Column('quizId', Integer, ForeignKey('quizzes.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column('userId', Text, nullable=False)
    score = db.Column(Integer, nullable=False)
    time_taken = db.Column('timeTaken', Integer, nullable=False)
    completed_at = db.Column('completedAt', Text, server_default=text('CURRENT_TIMESTAMP'))
    answers = db.Column(Text, nullable=False)

    quiz = db.relationship('Quiz', back_populates='attempts')

    def __repr__(self):
        return f'<QuizAttempt user_id={self.user_id}, quiz_id={self.quiz_id}, score={self.score}>'
