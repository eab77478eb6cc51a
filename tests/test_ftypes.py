import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from functools import cmp_to_key

import pytest
from lambda_lab.compose import compose, comparing, pipe, reverse_order, then_comparing
from lambda_lab.errors import NotFound
from lambda_lab.ftypes import Either, Maybe


# ТЕСТЫ Maybe
def test_maybe_some_and_nothing():
    just = Maybe.some(42)
    nothing = Maybe.nothing()

    assert just.is_some() and not just.is_none()
    assert nothing.is_none()
    assert just.get_or_else(0) == 42
    assert nothing.get_or_else(0) == 0
    assert repr(just) == "Some(42)"
    assert repr(nothing) == "Nothing"


def test_maybe_map_bind_filter():
    val = Maybe.some(10)
    assert val.map(lambda x: x * 2).get_or_else(0) == 20
    assert val.bind(lambda x: Maybe.some(x + 5)).get_or_else(0) == 15
    assert val.filter(lambda x: x > 100).is_none()
    assert Maybe.nothing().map(lambda x: x * 2).is_none()


def test_maybe_get_or_raise():
    assert Maybe.some("x").get_or_raise() == "x"
    with pytest.raises(NotFound, match="user Bob"):
        Maybe.of(None).get_or_raise("user Bob")


def test_not_found_is_lookup_error():
    assert issubclass(NotFound, LookupError)


# ТЕСТЫ Either
def test_either_left_and_right():
    right_val = Either.right(100)
    left_val = Either.left({"error": "boom"})

    assert right_val.is_right
    assert left_val.is_left
    assert right_val.get_or_else(0) == 100
    assert left_val.get_or_else(0) == 0
    assert left_val.map(lambda x: x + 1) is left_val


def test_either_fold():
    on_left = lambda e: "error: " + e["error"]  # noqa: E731
    on_right = lambda v: f"ok: {v}"  # noqa: E731
    assert Either.right(5).fold(on_left, on_right) == "ok: 5"
    assert Either.left({"error": "x"}).fold(on_left, on_right) == "error: x"


# ТЕСТЫ композиции
def test_compose_and_pipe():
    def f(x):
        return x + 1

    def g(x):
        return x * 2

    assert compose(f, g)(3) == 7
    assert pipe(f, g)(3) == 8


def test_comparators():
    words = ["pear", "fig", "apple", "kiwi"]
    by_len = comparing(len)

    assert by_len("fig", "pear") < 0
    assert by_len("pear", "kiwi") == 0
    assert sorted(words, key=cmp_to_key(by_len)) == ["fig", "pear", "kiwi", "apple"]
    assert sorted(words, key=cmp_to_key(reverse_order(by_len))) == [
        "apple",
        "pear",
        "kiwi",
        "fig",
    ]
    by_len_then_alpha = then_comparing(by_len, comparing(lambda w: w))
    assert sorted(words, key=cmp_to_key(by_len_then_alpha)) == [
        "fig",
        "kiwi",
        "pear",
        "apple",
    ]
