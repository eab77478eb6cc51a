from dataclasses import dataclass
from datetime import date
from typing import Tuple


@dataclass(frozen=True)
class Product:
    name: str
    price: float
    category: str


@dataclass(frozen=True)
class Order:
    """
    Заказ иммутабелен, кроме status: его меняет только
    OrderCatalog.update_status через object.__setattr__
    """

    id: str
    order_date: date
    customer_id: str
    products: Tuple[Product, ...]
    status: str

    # список товаров копируется в кортеж, внешний список не влияет на total
    def __post_init__(self):
        object.__setattr__(self, "products", tuple(self.products))

    @property
    def total(self) -> float:
        """Сумма цен товаров, считается при каждом обращении"""
        return sum(p.price for p in self.products)


@dataclass(frozen=True)
class User:
    name: str
    age: int
    department: str
    salary: float
