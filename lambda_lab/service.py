import logging
from datetime import date
from functools import cmp_to_key, reduce
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from .compose import Comparator, comparing, compose, reverse_order
from .domain import Order, Product, User
from .ftypes import Maybe
from .lazy import iter_orders_between, iter_products
from .transforms import (
    age_at_least,
    average,
    average_by,
    by_age_range,
    count_by,
    group_by,
    max_by,
    max_key_by_value,
    named,
    older_than,
    sum_by,
    total_above,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")


class OrderCatalog:
    """
    Фасад над списком заказов.
    Каталог единолично владеет списком: наружу отдаются только копии,
    status меняется только через update_status. Не потокобезопасен.
    """

    def __init__(self, orders: Optional[Iterable[Order]] = None):
        self._orders: List[Order] = list(orders or ())

    def __len__(self) -> int:
        return len(self._orders)

    @property
    def orders(self) -> List[Order]:
        """Снимок заказов в порядке добавления"""
        return list(self._orders)

    def add(self, order: Order) -> None:
        """Добавляет заказ в конец, дубликаты id не проверяются"""
        self._orders.append(order)
        logger.debug("order %s added for customer %s", order.id, order.customer_id)

    def find_high_value_orders(self, min_total: float) -> List[Order]:
        """Заказы с total строго больше min_total"""
        return list(filter(total_above(min_total), self._orders))

    def total_value_per_customer(self) -> Dict[str, float]:
        return sum_by(self._orders, lambda o: o.customer_id, lambda o: o.total)

    def most_ordered_product(self) -> Maybe[Product]:
        """
        Самый часто заказываемый товар (товары сравниваются по значению).
        При равном количестве побеждает тот, что встретился раньше.
        Пустой каталог -> Nothing.
        """
        counts = count_by(iter_products(self._orders), lambda p: p)
        return max_key_by_value(counts)

    def daily_sales(self, start_date: date, end_date: date) -> Dict[date, float]:
        """Выручка по дням в окне [start_date, end_date], ключи по возрастанию"""
        per_day = sum_by(
            iter_orders_between(self._orders, start_date, end_date),
            lambda o: o.order_date,
            lambda o: o.total,
        )
        return dict(sorted(per_day.items()))

    def update_status(self, order_id: str, update_fn: Callable[[str], str]) -> None:
        """Первый заказ с order_id получает status = update_fn(status)"""
        order = next((o for o in self._orders if o.id == order_id), None)
        if order is None:
            logger.debug("status update skipped: order %s not found", order_id)
            return
        old_status = order.status
        object.__setattr__(order, "status", update_fn(old_status))
        logger.debug("order %s status %s -> %s", order_id, old_status, order.status)

    def extract(
        self, filter_fn: Callable[[Order], bool], map_fn: Callable[[Order], R]
    ) -> List[R]:
        return list(map(map_fn, filter(filter_fn, self._orders)))

    def sales_count_by_category(self) -> Dict[str, int]:
        """Количество проданных товаров по категориям (каждое вхождение)"""
        return count_by(iter_products(self._orders), lambda p: p.category)

    def top_customer(self, start_date: date, end_date: date) -> Maybe[str]:
        """
        Клиент с наибольшей суммой заказов в окне дат (включительно).
        Ничья - побеждает клиент, раньше встретившийся в окне.
        Нет заказов в окне -> Nothing.
        """
        totals = sum_by(
            iter_orders_between(self._orders, start_date, end_date),
            lambda o: o.customer_id,
            lambda o: o.total,
        )
        return max_key_by_value(totals)

    def for_each(self, process_fn: Callable[[Order], None]) -> None:
        for order in self._orders:
            process_fn(order)

    def sorted(self, compare_fn: Comparator) -> List[Order]:
        """Новый список по компаратору; сортировка стабильна, каталог не меняется"""
        return sorted(self._orders, key=cmp_to_key(compare_fn))


class UserDirectory:
    """Фасад над списком пользователей"""

    def __init__(self, users: Optional[Iterable[User]] = None):
        self._users: List[User] = list(users or ())

    def __len__(self) -> int:
        return len(self._users)

    def add_user(self, user: User) -> None:
        self._users.append(user)
        logger.debug("user %s added to %s", user.name, user.department)

    def get_all_user_names(self) -> List[str]:
        return [u.name for u in self._users]

    def get_users_sorted_by_age(self) -> List[User]:
        return sorted(self._users, key=lambda u: u.age)

    def get_users_over_30(self) -> List[User]:
        """Пользователи с возрастом 30 и старше"""
        return list(filter(age_at_least(30), self._users))

    def group_users_by_department(self) -> Dict[str, List[User]]:
        return group_by(self._users, lambda u: u.department)

    def get_total_age(self) -> int:
        return reduce(lambda acc, u: acc + u.age, self._users, 0)

    def get_average_salary(self) -> float:
        return average(u.salary for u in self._users)

    def get_users_in_age_range(self, min_age: int, max_age: int) -> List[User]:
        """Обе границы включительно"""
        return list(filter(by_age_range(min_age, max_age), self._users))

    def find_user_by_name(self, name: str) -> Maybe[User]:
        return self.find_user(named(name))

    def are_all_users_above_age(self, age: int) -> bool:
        """age >= age для всех; для пустого справочника True"""
        return all(map(age_at_least(age), self._users))

    def find_user(self, predicate: Callable[[User], bool]) -> Maybe[User]:
        """Первый пользователь, удовлетворяющий предикату"""
        return Maybe.of(next(filter(predicate, self._users), None))

    def get_oldest_user_by_department(self) -> Dict[str, User]:
        """
        Самый старший в каждом отделе.
        При равном возрасте остаётся пользователь, добавленный раньше.
        """
        return {
            dept: max_by(users, lambda u: u.age).get_or_raise(dept)
            for dept, users in self.group_users_by_department().items()
        }

    def get_user_with_longest_name(self) -> Maybe[User]:
        """При равной длине имени остаётся пользователь, добавленный раньше"""
        return max_by(self._users, lambda u: len(u.name))

    def get_upper_case_names_of_users_above_age(self, age: int) -> List[str]:
        """Имена в верхнем регистре для возраста строго больше age"""
        upper_name = compose(str.upper, lambda u: u.name)
        return list(map(upper_name, filter(older_than(age), self._users)))

    def map_users(self, mapper: Callable[[User], R]) -> List[R]:
        return list(map(mapper, self._users))

    def get_all_user_names_to_string(self) -> str:
        return ", ".join(self.get_all_user_names())

    def get_average_age_by_department(self) -> Dict[str, float]:
        return average_by(self._users, lambda u: u.department, lambda u: u.age)

    def get_departments_sorted_by_average_age(self) -> List[Tuple[str, float]]:
        """
        Отделы по убыванию среднего возраста.
        Равные средние сохраняют порядок первого появления отдела.
        """
        by_average = reverse_order(comparing(lambda kv: kv[1]))
        return sorted(
            self.get_average_age_by_department().items(), key=cmp_to_key(by_average)
        )

    def filter_users_1(self, predicate: Callable[[User], bool]) -> List[User]:
        return list(filter(predicate, self._users))

    def filter_users_2(self, predicate: Callable[[User], bool]) -> List[User]:
        return list(filter(predicate, self._users))

    def process_users(self, consumer: Callable[[User], None]) -> None:
        for user in self._users:
            consumer(user)

    def sort_users(self, compare_fn: Comparator) -> None:
        """Заменяет хранимый порядок отсортированным (стабильно)"""
        self._users = sorted(self._users, key=cmp_to_key(compare_fn))
        logger.debug("directory re-sorted, %d users", len(self._users))

    def get_average_age(self) -> float:
        return average(u.age for u in self._users)

    def get_users(self) -> List[User]:
        """Независимая копия: изменения списка не затрагивают справочник"""
        return list(self._users)
