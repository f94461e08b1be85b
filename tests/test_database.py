# tests/test_database.py
import json
import sqlite3

import pytest

from studypath.database import QuizDatabase
from studypath.exceptions import QuizNotFoundError

from conftest import add_question, make_quiz


def test_create_quiz_returns_id_and_defaults(database):
    quiz_id = database.create_quiz(
        title='Mechanics', subject='Physics', difficulty='Beginner', time_limit=15, question_count=3,
    )

    quiz = database.get_quiz_with_questions(quiz_id)

    assert isinstance(quiz_id, int)
    assert quiz['title'] == 'Mechanics'
    assert quiz['description'] == ''
    assert quiz['time_limit'] == 15
    assert quiz['is_imported'] == 0
    assert quiz['imported_from_post_id'] is None
    assert quiz['created_at']
    assert quiz['questions'] == []


def test_create_quiz_rejects_unknown_difficulty(database):
    with pytest.raises(ValueError):
        database.create_quiz(title='X', subject='Y', difficulty='Expert', time_limit=1, question_count=1)

    assert database.get_all_quizzes() == []


def test_add_question_rejects_unknown_answer(database):
    quiz_id = make_quiz(database)

    with pytest.raises(ValueError):
        database.add_question(
            quiz_id=quiz_id, question='?', option_a='a', option_b='b', option_c='c', option_d='d',
            correct_answer='E', question_order=1,
        )


def test_add_question_requires_existing_quiz(database):
    with pytest.raises(sqlite3.IntegrityError):
        add_question(database, quiz_id=999, order=1)


def test_quizzes_by_subject_newest_first(database):
    first = make_quiz(database, title='First')
    second = make_quiz(database, title='Second')
    make_quiz(database, title='Other', subject='Physics')

    quizzes = database.get_quizzes_by_subject('Mathematics')

    assert [quiz['id'] for quiz in quizzes] == [second, first]
    assert database.get_quizzes_by_subject('Chemistry') == []


def test_questions_returned_in_question_order(database):
    quiz_id = make_quiz(database)
    for order in (3, 1, 2):
        add_question(database, quiz_id, order)

    quiz = database.get_quiz_with_questions(quiz_id)

    assert [question['question_order'] for question in quiz['questions']] == [1, 2, 3]
    assert quiz['questions'][0]['quiz_id'] == quiz_id
    assert quiz['questions'][0]['option_a'] == 'a'


def test_missing_quiz_raises_not_found(database):
    with pytest.raises(QuizNotFoundError, match='Quiz not found') as excinfo:
        database.get_quiz_with_questions(12345)

    assert excinfo.value.quiz_id == 12345


def test_question_count_is_not_enforced(database):
    quiz_id = make_quiz(database, question_count=5)
    add_question(database, quiz_id, 1)

    quiz = database.get_quiz_with_questions(quiz_id)

    assert quiz['question_count'] == 5
    assert len(quiz['questions']) == 1


def test_delete_quiz_cascades_to_its_rows_only(database):
    doomed = make_quiz(database, title='Doomed')
    kept = make_quiz(database, title='Kept')
    for quiz_id in (doomed, kept):
        add_question(database, quiz_id, 1)
        add_question(database, quiz_id, 2)
        database.save_quiz_attempt(quiz_id=quiz_id, user_id='u1', score=50, time_taken=60, answers=[0, 1])

    assert database.delete_quiz(doomed) is True

    questions = database.get_all_questions()
    attempts = database.get_all_attempts()
    assert {question['quiz_id'] for question in questions} == {kept}
    assert len(questions) == 2
    assert [attempt['quiz_id'] for attempt in attempts] == [kept]
    assert database.delete_quiz(doomed) is False


def test_attempt_answers_are_serialized(database):
    quiz_id = make_quiz(database)

    database.save_quiz_attempt(quiz_id=quiz_id, user_id='u1', score=75, time_taken=90, answers=[1, 0, 3])
    database.save_quiz_attempt(quiz_id=quiz_id, user_id='u1', score=25, time_taken=30, answers='[2]')

    attempts = database.get_all_attempts()
    assert [json.loads(attempt['answers']) for attempt in attempts] == [[2], [1, 0, 3]]
    assert attempts[0]['time_taken'] == 30


def test_progress_missing_returns_none(database):
    assert database.get_user_progress('nobody', 'Mathematics') is None


def test_progress_insert_defaults_unspecified_fields_to_zero(database):
    database.update_user_progress('u', 's', total_score=80, completed_quizzes=1)

    progress = database.get_user_progress('u', 's')

    assert progress['total_quizzes'] == 0
    assert progress['completed_quizzes'] == 1
    assert progress['total_score'] == 80
    assert progress['average_score'] == 0
    assert progress['last_activity']


def test_progress_update_keeps_omitted_fields(database):
    database.update_user_progress('u', 's', total_quizzes=4, completed_quizzes=2, total_score=150, average_score=75)

    database.update_user_progress('u', 's', total_score=230, completed_quizzes=None)

    progress = database.get_user_progress('u', 's')
    assert progress['total_quizzes'] == 4
    assert progress['completed_quizzes'] == 2
    assert progress['total_score'] == 230
    assert progress['average_score'] == 75
    assert len(database.get_all_progress()) == 1


def test_progress_accepts_zero_completed_with_average(database):
    # Без проверки: average_score сохраняется как передан
    database.update_user_progress('u', 's', completed_quizzes=0, average_score=55)

    assert database.get_user_progress('u', 's')['average_score'] == 55


def test_progress_rejects_unknown_fields(database):
    with pytest.raises(ValueError, match='streak'):
        database.update_user_progress('u', 's', streak=3)


def test_second_progress_row_violates_unique_constraint(database):
    database.update_user_progress('u', 's', total_score=10)

    with pytest.raises(sqlite3.IntegrityError):
        with database.connect() as conn:
            conn.execute("INSERT INTO userProgress (userId, subject) VALUES (?, ?)", ('u', 's'))


def test_upsert_progress_score(database):
    database.upsert_progress_score('u', 'Mathematics', 80)
    database.upsert_progress_score('u', 'Mathematics', 60)

    progress = database.get_user_progress('u', 'Mathematics')
    assert progress['total_quizzes'] == 1
    assert progress['completed_quizzes'] == 2
    assert progress['total_score'] == 140
    assert progress['average_score'] == 70


def test_clear_all_data_empties_every_table(database):
    quiz_id = make_quiz(database)
    add_question(database, quiz_id, 1)
    database.save_quiz_attempt(quiz_id=quiz_id, user_id='u1', score=100, time_taken=10, answers=[0])
    database.update_user_progress('u1', 'Mathematics', total_score=100)

    database.clear_all_data()

    assert database.get_all_quizzes() == []
    assert database.get_all_questions() == []
    assert database.get_all_attempts() == []
    assert database.get_all_progress() == []


def test_count_rows(database):
    make_quiz(database)

    assert database.count_rows('quizzes') == 1
    assert database.count_rows('questions') == 0
    with pytest.raises(ValueError):
        database.count_rows('users')


def test_table_info_reports_counts(database):
    quiz_id = make_quiz(database)
    add_question(database, quiz_id, 1)

    assert database.get_table_info() == {'quizzes': 1, 'questions': 1, 'quizAttempts': 0}


def test_bulk_reads_return_empty_on_failure(tmp_path):
    broken = QuizDatabase(str(tmp_path))

    assert broken.get_all_quizzes() == []
    assert broken.get_all_questions() == []
    assert broken.get_all_attempts() == []
    assert broken.get_all_progress() == []


def test_other_reads_propagate_engine_errors(tmp_path):
    broken = QuizDatabase(str(tmp_path))

    with pytest.raises(sqlite3.Error):
        broken.get_quizzes_by_subject('Mathematics')


def test_progress_update_refreshes_last_activity(database):
    database.update_user_progress('u', 's', total_score=10)
    with database.connect() as conn:
        conn.execute("UPDATE userProgress SET lastActivity = '2000-01-01 00:00:00'")

    database.update_user_progress('u', 's', total_score=20)

    progress = database.get_user_progress('u', 's')
    assert progress['total_score'] == 20
    assert progress['last_activity'] != '2000-01-01 00:00:00'
