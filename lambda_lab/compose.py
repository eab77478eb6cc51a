from functools import reduce
from typing import Any, Callable, TypeVar

T = TypeVar("T")

Comparator = Callable[[T, T], int]


def compose(*funcs):
    """compose(f, g, h)(x) == f(g(h(x)))"""
    return reduce(lambda f, g: lambda x: f(g(x)), funcs)


def pipe(*funcs):
    """pipe(f, g, h)(x) == h(g(f(x)))"""
    return reduce(lambda f, g: lambda x: g(f(x)), funcs)


# ============ Компараторы cmp(a, b) -> int ============


def comparing(key: Callable[[T], Any]) -> Comparator:
    """Компаратор по ключу: отрицательное, 0 или положительное"""

    def cmp(a: T, b: T) -> int:
        ka, kb = key(a), key(b)
        return (ka > kb) - (ka < kb)

    return cmp


def reverse_order(cmp: Comparator) -> Comparator:
    return lambda a, b: cmp(b, a)


def then_comparing(*comparators: Comparator) -> Comparator:
    """Первый ненулевой результат среди компараторов"""

    def cmp(a: T, b: T) -> int:
        return next((r for r in (c(a, b) for c in comparators) if r != 0), 0)

    return cmp
