import json
import logging
from datetime import date
from functools import reduce
from typing import Any, Callable, Dict, Hashable, Iterable, List, Tuple, TypeVar

from .domain import Order, Product, User
from .errors import SeedError
from .ftypes import Either, Maybe

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


# ============ Загрузка seed-файла ============


def parse_product(raw: dict) -> Either[dict, Product]:
    try:
        return Either.right(
            Product(
                name=str(raw["name"]),
                price=float(raw["price"]),
                category=str(raw["category"]),
            )
        )
    except (KeyError, TypeError, ValueError) as exc:
        return Either.left({"error": f"bad product: {exc!r}", "record": raw})


def parse_order(raw: dict) -> Either[dict, Order]:
    """
    Разбирает запись заказа → Either[error, Order]
    Left, если нет обязательного поля, дата не ISO или битый товар
    """
    try:
        order_date = date.fromisoformat(str(raw["order_date"]))
        raw_products = list(raw.get("products", []))
        order_id = str(raw["id"])
        customer_id = str(raw["customer_id"])
    except (KeyError, TypeError, ValueError) as exc:
        return Either.left({"error": f"bad order: {exc!r}", "record": raw})

    parsed = tuple(map(parse_product, raw_products))
    bad = next((p for p in parsed if p.is_left), None)
    if bad is not None:
        return Either.left({**bad.value, "order_id": order_id})

    return Either.right(
        Order(
            id=order_id,
            order_date=order_date,
            customer_id=customer_id,
            products=tuple(p.value for p in parsed),
            status=str(raw.get("status", "PENDING")),
        )
    )


def parse_user(raw: dict) -> Either[dict, User]:
    try:
        return Either.right(
            User(
                name=str(raw["name"]),
                age=int(raw["age"]),
                department=str(raw["department"]),
                salary=float(raw["salary"]),
            )
        )
    except (KeyError, TypeError, ValueError) as exc:
        return Either.left({"error": f"bad user: {exc!r}", "record": raw})


def _collect(kind: str, results: Iterable[Either]) -> Tuple[Any, ...]:
    """Оставляет Right-значения, Left пишет в лог и пропускает"""

    def keep(acc: Tuple[Any, ...], result: Either) -> Tuple[Any, ...]:
        if result.is_left:
            logger.warning("skipping %s record: %s", kind, result.value["error"])
            return acc
        return acc + (result.value,)

    return reduce(keep, results, ())


def load_seed(path: str) -> Tuple[Tuple[Order, ...], Tuple[User, ...]]:
    """Загружает seed.json и возвращает (orders, users)"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise SeedError(f"cannot read seed file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise SeedError(f"seed file {path} must contain a JSON object")

    orders = _collect("order", map(parse_order, data.get("orders", [])))
    users = _collect("user", map(parse_user, data.get("users", [])))
    logger.info("loaded %d orders and %d users from %s", len(orders), len(users), path)
    return orders, users


# ============ Агрегации (reduce) ============


def total_sales(orders: Iterable[Order]) -> float:
    """Сумма всех заказов через reduce"""
    return reduce(lambda acc, o: acc + o.total, orders, 0.0)


def group_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """Группировка с сохранением порядка первого появления ключа"""

    def add(acc: dict, item: T) -> dict:
        acc.setdefault(key(item), []).append(item)
        return acc

    return reduce(add, items, {})


def sum_by(
    items: Iterable[T], key: Callable[[T], K], value: Callable[[T], float]
) -> Dict[K, float]:
    def add(acc: dict, item: T) -> dict:
        k = key(item)
        acc[k] = acc.get(k, 0.0) + value(item)
        return acc

    return reduce(add, items, {})


def count_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, int]:
    def add(acc: dict, item: T) -> dict:
        k = key(item)
        acc[k] = acc.get(k, 0) + 1
        return acc

    return reduce(add, items, {})


def average(values: Iterable[float]) -> float:
    """Среднее; для пустой выборки 0.0"""
    count, total = reduce(lambda acc, v: (acc[0] + 1, acc[1] + v), values, (0, 0.0))
    return total / count if count else 0.0


def average_by(
    items: Iterable[T], key: Callable[[T], K], value: Callable[[T], float]
) -> Dict[K, float]:
    return {
        k: average(map(value, group)) for k, group in group_by(items, key).items()
    }


def max_by(items: Iterable[T], key: Callable[[T], Any]) -> Maybe[T]:
    """
    Элемент с максимальным key. При равенстве побеждает
    встретившийся раньше (сравнение строго больше).
    """
    _missing = object()
    best = reduce(
        lambda acc, x: x if acc is _missing or key(x) > key(acc) else acc,
        items,
        _missing,
    )
    return Maybe.nothing() if best is _missing else Maybe.some(best)


def max_key_by_value(mapping: Dict[K, Any]) -> Maybe[K]:
    """Ключ с максимальным значением; ничьи - первый по порядку ключей"""
    return max_by(mapping.items(), lambda kv: kv[1]).map(lambda kv: kv[0])


# ============ Замыкания-фильтры (HOF) ============


def by_customer(customer_id: str) -> Callable[[Order], bool]:
    return lambda o: o.customer_id == customer_id


def by_status(status: str) -> Callable[[Order], bool]:
    return lambda o: o.status == status


def placed_between(start: date, end: date) -> Callable[[Order], bool]:
    """Фильтр по дате заказа, обе границы включительно"""
    return lambda o: start <= o.order_date <= end


def total_above(min_total: float) -> Callable[[Order], bool]:
    """Строго больше порога: заказ с total == min_total не проходит"""
    return lambda o: o.total > min_total


def by_department(department: str) -> Callable[[User], bool]:
    return lambda u: u.department == department


def by_age_range(min_age: int, max_age: int) -> Callable[[User], bool]:
    """Фильтр по возрасту, обе границы включительно"""
    return lambda u: min_age <= u.age <= max_age


def age_at_least(age: int) -> Callable[[User], bool]:
    return lambda u: u.age >= age


def older_than(age: int) -> Callable[[User], bool]:
    return lambda u: u.age > age


def named(name: str) -> Callable[[User], bool]:
    return lambda u: u.name == name


# ============ Обновление статуса ============


def set_status(status: str) -> Callable[[str], str]:
    """Апдейтер, который игнорирует текущий статус"""
    return lambda _current: status


def advance_status(flow: Dict[str, str]) -> Callable[[str], str]:
    """
    Переход по таблице статусов, например
    {"PENDING": "SHIPPED", "SHIPPED": "DELIVERED"}.
    Статус без перехода остаётся прежним.
    """
    return lambda current: flow.get(current, current)


# ============ Период ============


def resolve_period(
    selected: Tuple[date, ...], fallback: Tuple[date, date]
) -> Tuple[date, date]:
    """
    Выбор из date_input → (start, end)
    () - fallback, (d,) - один день, (start, end) - как есть
    """
    if not selected:
        return fallback
    return (selected[0], selected[-1])
