# studypath/services/__init__.py
"""
Сервисы работы с тестами: фасад над прямым SQL-слоем и сервис на SQLAlchemy
"""
from .quiz_service import QuizService
from .orm_quiz_service import OrmQuizService

__all__ = ['QuizService', 'OrmQuizService']
