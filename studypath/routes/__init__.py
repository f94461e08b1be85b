# studypath/routes/__init__.py
"""
Инициализация маршрутов приложения
Диагностический blueprint регистрируется в create_app
"""
