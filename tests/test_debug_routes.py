# tests/test_debug_routes.py
from config import Config, _env_flag
from studypath import create_app, db

from conftest import add_question, make_quiz


def test_stats_on_empty_store(client):
    response = client.get('/debug/')

    assert response.status_code == 200
    assert response.get_json() == {
        'quiz_count': 0, 'question_count': 0, 'attempt_count': 0, 'progress_count': 0,
    }


def test_seed_and_browse(client):
    response = client.post('/debug/seed')
    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert set(body['quizzes']) == {'mathematics', 'physics', 'chemistry', 'biology'}

    quizzes = client.get('/debug/quizzes', query_string={'subject': 'Chemistry'}).get_json()
    assert [quiz['title'] for quiz in quizzes] == ['Atomic Structure']

    detail = client.get(f"/debug/quizzes/{quizzes[0]['id']}").get_json()
    assert len(detail['questions']) == 3

    questions = client.get('/debug/tables/questions').get_json()
    assert len(questions) == 14


def test_seed_through_orm_layer(client):
    response = client.post('/debug/seed', query_string={'layer': 'orm'})

    assert response.get_json()['message'] == 'Sample quizzes created successfully with SQLAlchemy'
    assert client.get('/debug/').get_json()['quiz_count'] == 2


def test_schema_lists_columns(client):
    schema = client.get('/debug/schema').get_json()

    assert set(schema) == {'quizzes', 'questions', 'quizAttempts', 'userProgress'}
    assert 'importedFromPostId' in schema['quizzes']


def test_missing_quiz_returns_404(client):
    response = client.get('/debug/quizzes/777')

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Quiz not found', 'quiz_id': 777}


def test_unknown_table_returns_404(client):
    assert client.get('/debug/tables/users').status_code == 404


def test_subject_is_required(client):
    assert client.get('/debug/quizzes').status_code == 400
    assert client.get('/debug/quizzes', query_string={'subject': '  '}).status_code == 400


def test_progress_and_attempts(client, service):
    quiz_id = make_quiz(service)
    add_question(service, quiz_id, 1)
    service.save_quiz_attempt(quiz_id=quiz_id, user_id='u', score=80, time_taken=60, answers=[0])
    service.calculate_and_update_progress('u', 'Mathematics', 80)

    body = client.get('/debug/progress/u/Mathematics').get_json()
    assert body['progress']['completed_quizzes'] == 1
    assert body['stats']['average_score'] == 80

    attempts = client.get('/debug/attempts/u', query_string={'quiz_id': quiz_id}).get_json()
    assert len(attempts) == 1
    assert attempts[0]['score'] == 80
    assert attempts[0]['answers'] == '[0]'


def test_progress_for_unknown_user(client):
    body = client.get('/debug/progress/nobody/History').get_json()

    assert body['progress'] is None
    assert body['stats']['completed_quizzes'] == 0


def test_clear(client):
    client.post('/debug/seed')

    response = client.post('/debug/clear')

    assert response.get_json() == {'success': True, 'message': 'All data cleared'}
    assert client.get('/debug/tables/quizzes').get_json() == []


def test_self_check(client):
    response = client.post('/debug/self-check')

    assert response.status_code == 200
    assert response.get_json()['success'] is True


def test_debug_views_flag_defaults_to_off(monkeypatch):
    monkeypatch.delenv('STUDYPATH_DEBUG_VIEWS', raising=False)
    assert _env_flag('STUDYPATH_DEBUG_VIEWS', False) is False

    monkeypatch.setenv('STUDYPATH_DEBUG_VIEWS', 'yes')
    assert _env_flag('STUDYPATH_DEBUG_VIEWS', False) is True


def test_debug_views_not_mounted_when_disabled(tmp_path):
    class ClosedConfig(Config):
        DATABASE_PATH = str(tmp_path / 'closed.db')
        ENABLE_DEBUG_VIEWS = False

    app = create_app(ClosedConfig)
    client = app.test_client()

    assert client.get('/debug/').status_code == 404
    assert client.post('/debug/clear').status_code == 404
    assert 'debug' not in app.blueprints

    with app.app_context():
        db.engine.dispose()
