# studypath/models/__init__.py
"""
Модели данных StudyPath для слоя SQLAlchemy
Объединение всех моделей в одном месте
"""
from .quiz import Quiz, Question
from .attempt import QuizAttempt
from .progress import UserProgress

__all__ = ['Quiz', 'Question', 'QuizAttempt', 'UserProgress']
