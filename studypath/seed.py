# studypath/seed.py
"""
Примеры тестов для демонстрации и повторного заполнения базы
"""
import logging

logger = logging.getLogger(__name__)

SAMPLE_QUIZZES = [
    {
        'title': 'Basic Calculus',
        'description': 'Fundamental concepts of calculus including derivatives and integrals',
        'subject': 'Mathematics',
        'difficulty': 'Intermediate',
        'time_limit': 20,
        'question_count': 5,
        'questions': [
            ('What is the derivative of x²?', 'x', '2x', 'x²', '2x²', 'B',
             'The derivative of x² is 2x using the power rule.'),
            ('Which of the following is a quadratic equation?', 'x + 2 = 0', 'x² + 3x + 1 = 0',
             'x³ + x = 0', '2x + 1 = 0', 'B',
             'A quadratic equation has the form ax² + bx + c = 0.'),
            ('What is the slope of a horizontal line?', '0', '1', 'undefined', '-1', 'A',
             'A horizontal line has a slope of 0.'),
            ('Solve for x: 2x + 5 = 13', 'x = 4', 'x = 8', 'x = 6', 'x = 9', 'A',
             '2x + 5 = 13 → 2x = 8 → x = 4'),
            ('What is the area of a circle with radius 3?', '6π', '9π', '12π', '18π', 'B',
             'Area = πr² = π(3)² = 9π'),
        ],
    },
    {
        'title': 'Mechanics Fundamentals',
        'description': 'Basic principles of classical mechanics',
        'subject': 'Physics',
        'difficulty': 'Beginner',
        'time_limit': 15,
        'question_count': 3,
        'questions': [
            ('What is the SI unit of force?', 'Joule', 'Newton', 'Watt', 'Pascal', 'B',
             'The SI unit of force is the Newton (N).'),
            ('Which law states that every action has an equal and opposite reaction?',
             "Newton's First Law", "Newton's Second Law", "Newton's Third Law",
             "Newton's Law of Universal Gravitation", 'C',
             "Newton's Third Law states that every action has an equal and opposite reaction."),
            ('What is the formula for kinetic energy?', 'KE = mgh', 'KE = ½mv²', 'KE = mv', 'KE = ma', 'B',
             'Kinetic energy is calculated using KE = ½mv² where m is mass and v is velocity.'),
        ],
    },
    {
        'title': 'Atomic Structure',
        'description': 'Basic concepts of atomic structure and periodic table',
        'subject': 'Chemistry',
        'difficulty': 'Beginner',
        'time_limit': 12,
        'question_count': 3,
        'questions': [
            ('What is the atomic number of Carbon?', '4', '6', '8', '12', 'B',
             'Carbon has 6 protons, so its atomic number is 6.'),
            ("Which gas makes up about 78% of Earth's atmosphere?", 'Oxygen', 'Carbon Dioxide',
             'Nitrogen', 'Argon', 'C',
             "Nitrogen (N₂) makes up about 78% of Earth's atmosphere."),
            ('What is the chemical symbol for Gold?', 'Go', 'Gd', 'Au', 'Ag', 'C',
             "Gold's chemical symbol is Au, from the Latin word 'aurum'."),
        ],
    },
    {
        'title': 'Cell Biology Basics',
        'description': 'Introduction to cell structure and function',
        'subject': 'Biology',
        'difficulty': 'Beginner',
        'time_limit': 10,
        'question_count': 3,
        'questions': [
            ('What is the powerhouse of the cell?', 'Nucleus', 'Mitochondria', 'Ribosome', 'Chloroplast', 'B',
             'Mitochondria are called the powerhouse of the cell because they produce ATP energy.'),
            ('What process do plants use to make food?', 'Respiration', 'Photosynthesis',
             'Digestion', 'Fermentation', 'B',
             'Plants use photosynthesis to convert sunlight, water, and CO₂ into glucose.'),
            ('What is DNA short for?', 'Deoxyribonucleic Acid', 'Deoxyribose Nucleic Acid',
             'Dioxynucleic Acid', 'Diribonucleic Acid', 'A',
             'DNA stands for Deoxyribonucleic Acid.'),
        ],
    },
]

# Набор для сервиса на SQLAlchemy: только математика и физика
ORM_SAMPLE_SUBJECTS = ('Mathematics', 'Physics')


def iter_sample_quizzes(subjects=None):
    """
    Примеры тестов в виде пар (поля теста, поля вопросов)

    Args:
        subjects: Ограничение по предметам (None - все примеры)

    Yields:
        tuple: (dict с полями create_quiz, list of dict с полями add_question без quiz_id)
    """
    for sample in SAMPLE_QUIZZES:
        if subjects is not None and sample['subject'] not in subjects:
            continue
        quiz_fields = {key: value for key, value in sample.items() if key != 'questions'}
        questions = []
        for order, (text, a, b, c, d, answer, explanation) in enumerate(sample['questions'], start=1):
            questions.append({
                'question': text,
                'option_a': a,
                'option_b': b,
                'option_c': c,
                'option_d': d,
                'correct_answer': answer,
                'explanation': explanation,
                'question_order': order,
            })
        yield quiz_fields, questions


def seed_database(database):
    """
    Очистка базы и заполнение всеми примерами тестов через прямой SQL-слой

    Args:
        database (QuizDatabase): Прямой слой доступа

    Returns:
        dict: success, message и quizzes ({предмет в нижнем регистре: ID теста})
    """
    logger.info("Заполнение базы примерами тестов...")
    database.clear_all_data()

    quiz_ids = {}
    for quiz_fields, questions in iter_sample_quizzes():
        quiz_id = database.create_quiz(**quiz_fields)
        for question in questions:
            database.add_question(quiz_id=quiz_id, **question)
        quiz_ids[quiz_fields['subject'].lower()] = quiz_id

    database.get_table_info()

    subjects = ', '.join(sample['subject'] for sample in SAMPLE_QUIZZES)
    return {
        'success': True,
        'message': f'Database seeded with sample quizzes for {subjects}',
        'quizzes': quiz_ids,
    }
