# studypath/models/progress.py
"""
Модель прогресса пользователя по предмету StudyPath
"""
from studypath import db
from studypath.models.base import SerializerMixin
from sqlalchemy import Integer, Float, Text, UniqueConstraint, text


class UserProgress(SerializerMixin, db.Model):
    """
    Модель прогресса (одна запись на пару пользователь/предмет)

    Attributes:
        user_id (str): Внешний идентификатор пользователя
        subject (str): Предмет
        total_quizzes (int): Число тестов
        completed_quizzes (int): Число завершённых тестов
        total_score (int): Сумма процентов всех результатов (может быть больше 100)
        average_score (float): total_score / completed_quizzes
        last_activity (str): Время последнего обновления
    """

    __tablename__ = 'userProgress'
    __table_args__ = (UniqueConstraint('userId', 'subject'),)

    id = db.Column(Integer, primary_key=True, autoincrement=True)
    user_id = db.Column('userId', Text, nullable=False)
    subject = db.Column(Text, nullable=False)
    total_quizzes = db.Column('totalQuizzes', Integer, server_default=text('0'))
    completed_quizzes = db.Column('completedQuizzes', Integer, server_default=text('0'))
    total_score = db.Column('totalScore', Integer, server_default=text('0'))
    average_score = db.Column('averageScore', Float, server_default=text('0'))
    last_activity = db.Column('lastActivity', Text, server_default=text('CURRENT_TIMESTAMP'))

    def __repr__(self):
        return f'<UserProgress {self.user_id} {self.subject}: {self.average_score}>'
