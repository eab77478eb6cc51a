class NotFound(LookupError):
    """Поиск или агрегация по пустой выборке ничего не нашли"""


class SeedError(ValueError):
    """seed-файл не читается или имеет неверную структуру"""
