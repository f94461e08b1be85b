# studypath/exceptions.py
"""
Исключения слоя хранения StudyPath
"""


class QuizNotFoundError(LookupError):
    """Тест с указанным идентификатором отсутствует в базе"""

    def __init__(self, quiz_id=None):
        super().__init__("Quiz not found")
        self.quiz_id = quiz_id
