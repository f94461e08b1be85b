# studypath/diagnostics.py
"""
Проверка работоспособности локальной базы данных
Создаёт тестовые записи и читает их обратно, результат выводится в лог
"""
import logging

logger = logging.getLogger(__name__)

SELF_CHECK_USER = 'test-user'
SELF_CHECK_SUBJECT = 'Test'


def run_self_check(service):
    """
    Прогон основных операций фасада на тестовых данных

    Ошибка не пробрасывается: функция используется только диагностическим экраном.

    Args:
        service (QuizService): Фасад работы с тестами

    Returns:
        bool: True если все операции выполнены успешно
    """
    try:
        logger.info("Проверка базы данных...")
        service.initialize()

        quiz_id = service.create_quiz(
            title='Test Quiz',
            description='A test quiz to verify database functionality',
            subject=SELF_CHECK_SUBJECT,
            difficulty='Beginner',
            time_limit=10,
            question_count=2,
        )
        logger.info(f"Тест создан, ID: {quiz_id}")

        service.add_question(
            quiz_id=quiz_id, question='What is 2 + 2?',
            option_a='3', option_b='4', option_c='5', option_d='6',
            correct_answer='B', explanation='2 + 2 = 4', question_order=1,
        )
        service.add_question(
            quiz_id=quiz_id, question='What is the capital of France?',
            option_a='London', option_b='Berlin', option_c='Paris', option_d='Madrid',
            correct_answer='C', explanation='Paris is the capital of France', question_order=2,
        )

        quiz = service.get_quiz_with_questions(quiz_id)
        logger.info(f"Тест прочитан, вопросов: {len(quiz['questions'])}")

        attempt_id = service.save_quiz_attempt(
            quiz_id=quiz_id, user_id=SELF_CHECK_USER, score=100, time_taken=300, answers=[0, 2],
        )
        logger.info(f"Попытка сохранена, ID: {attempt_id}")

        service.update_user_progress(
            SELF_CHECK_USER, SELF_CHECK_SUBJECT,
            total_quizzes=1, completed_quizzes=1, total_score=100, average_score=100,
        )
        progress = service.get_user_progress(SELF_CHECK_USER, SELF_CHECK_SUBJECT)
        logger.info(f"Прогресс пользователя прочитан: {progress}")
    except Exception:
        logger.exception("Проверка базы данных не пройдена")
        return False

    logger.info("Все проверки базы данных пройдены")
    return True
