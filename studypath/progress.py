# studypath/progress.py
"""
Агрегация прогресса пользователя по предмету
Чистые функции без обращения к базе данных
"""

PROGRESS_FIELDS = ('total_quizzes', 'completed_quizzes', 'total_score', 'average_score')


def fold_score(progress, new_score):
    """
    Учёт нового результата теста в накопленном прогрессе

    Средний балл - простое среднее всех процентов, без весов по числу
    вопросов или сложности.

    Args:
        progress (dict): Текущая запись прогресса или None
        new_score (int): Результат нового теста в процентах

    Returns:
        dict: Поля для записи через update_user_progress
    """
    if progress is None:
        return {
            'total_quizzes': 1,
            'completed_quizzes': 1,
            'total_score': new_score,
            'average_score': new_score,
        }

    total_score = progress['total_score'] + new_score
    completed_quizzes = progress['completed_quizzes'] + 1
    return {
        'total_score': total_score,
        'completed_quizzes': completed_quizzes,
        'average_score': total_score / completed_quizzes,
    }


def summarize_progress(progress):
    """Сводка счётчиков прогресса (нули, если записи нет)"""
    if progress is None:
        return {field: 0 for field in PROGRESS_FIELDS}
    return {field: progress[field] for field in PROGRESS_FIELDS}
