# studypath/routes/debug.py
"""
Диагностические маршруты для просмотра и управления локальной базой данных
Вызывают операции фасада напрямую и возвращают результат в JSON
"""
from flask import Blueprint, jsonify, request, current_app
from flask_babel import _

from studypath import get_orm_quiz_service, get_quiz_service
from studypath.diagnostics import run_self_check
from studypath.exceptions import QuizNotFoundError

# Создание Blueprint для диагностических маршрутов
bp = Blueprint('debug', __name__)

# Имя таблицы в URL -> метод фасада для просмотра всех строк
TABLE_READERS = {
    'quizzes': 'get_all_quizzes',
    'questions': 'get_all_questions',
    'attempts': 'get_all_attempts',
    'progress': 'get_all_progress',
}


@bp.errorhandler(QuizNotFoundError)
def quiz_not_found(error):
    return jsonify({'error': _('Quiz not found'), 'quiz_id': error.quiz_id}), 404


@bp.route('/')
def index():
    """Количество записей во всех таблицах"""
    return jsonify(get_quiz_service().get_database_stats())


@bp.route('/schema')
def schema():
    """Колонки каждой таблицы"""
    return jsonify(get_quiz_service().describe_tables())


@bp.route('/tables/<table>')
def table_rows(table):
    reader = TABLE_READERS.get(table)
    if reader is None:
        return jsonify({'error': _('Unknown table: %(table)s', table=table)}), 404
    return jsonify(getattr(get_quiz_service(), reader)())


@bp.route('/quizzes')
def quizzes():
    subject = request.args.get('subject', '').strip()
    if not subject:
        return jsonify({'error': _('Subject is required')}), 400
    return jsonify(get_quiz_service().get_quizzes_by_subject(subject))


@bp.route('/quizzes/<int:quiz_id>')
def quiz_detail(quiz_id):
    return jsonify(get_quiz_service().get_quiz_with_questions(quiz_id))


@bp.route('/progress/<user_id>/<subject>')
def progress(user_id, subject):
    service = get_quiz_service()
    return jsonify({
        'progress': service.get_user_progress(user_id, subject),
        'stats': service.get_quiz_stats(user_id, subject),
    })


@bp.route('/attempts/<user_id>')
def attempts(user_id):
    """Попытки пользователя (через слой SQLAlchemy)"""
    quiz_id = request.args.get('quiz_id', type=int)
    records = get_orm_quiz_service().get_user_quiz_attempts(user_id, quiz_id)
    return jsonify([record.to_dict() for record in records])


# === Маршруты изменения данных ===

@bp.route('/seed', methods=['POST'])
def seed():
    """Повторное заполнение примерами; ?layer=orm использует слой SQLAlchemy"""
    if request.args.get('layer') == 'orm':
        result = get_orm_quiz_service().create_sample_quizzes()
    else:
        result = get_quiz_service().create_sample_quizzes()
    current_app.logger.info(f"Заполнение примерами: {result['message']}")
    return jsonify(result)


@bp.route('/clear', methods=['POST'])
def clear():
    get_quiz_service().clear_all_data()
    return jsonify({'success': True, 'message': _('All data cleared')})


@bp.route('/self-check', methods=['POST'])
def self_check():
    passed = run_self_check(get_quiz_service())
    message = _('All database checks passed') if passed else _('Database check failed')
    return jsonify({'success': passed, 'message': message}), 200 if passed else 500
