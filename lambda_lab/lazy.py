from datetime import date
from typing import Iterable, Iterator
from .domain import Order, Product


## ленивый генератор, заказы с датой в окне [start, end] включительно
def iter_orders_between(
    orders: Iterable[Order], start: date, end: date
) -> Iterator[Order]:
    for order in orders:
        if start <= order.order_date <= end:
            yield order


## разворачивает товары всех заказов в один поток, повторы сохраняются
def iter_products(orders: Iterable[Order]) -> Iterator[Product]:
    for order in orders:
        yield from order.products
