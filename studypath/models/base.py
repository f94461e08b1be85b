# studypath/models/base.py
"""
Общие возможности моделей StudyPath
"""
from sqlalchemy import inspect


class SerializerMixin:
    """
    Преобразование модели в словарь

    Ключи совпадают с именами атрибутов модели (snake_case), поэтому
    результат имеет ту же форму, что и строки прямого SQL-слоя.
    """

    def to_dict(self):
        mapper = inspect(self).mapper
        return {attr.key: getattr(self, attr.key) for attr in mapper.column_attrs}
