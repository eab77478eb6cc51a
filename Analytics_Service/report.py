from datetime import date
from functools import reduce
from typing import Dict, List

from lambda_lab.compose import pipe
from lambda_lab.domain import Order
from lambda_lab.service import OrderCatalog, UserDirectory
from lambda_lab.transforms import (
    average,
    by_status,
    count_by,
    placed_between,
    sum_by,
    total_sales,
)


# ============ Отчёты по заказам ============


def sales_summary(catalog: OrderCatalog, high_value_threshold: float = 100.0) -> dict:
    """Сводка по каталогу заказов"""
    orders = catalog.orders
    revenue = total_sales(orders)

    def count_statuses(acc: dict, order: Order) -> dict:
        return {**acc, order.status: acc.get(order.status, 0) + 1}

    return {
        "total_orders": len(orders),
        "total_revenue": revenue,
        "average_order_value": average(o.total for o in orders),
        "high_value_orders": len(catalog.find_high_value_orders(high_value_threshold)),
        "orders_by_status": reduce(count_statuses, orders, {}),
        "most_ordered_product": catalog.most_ordered_product()
        .map(lambda p: p.name)
        .get_or_else(None),
    }


def customer_report(catalog: OrderCatalog, start: date, end: date) -> List[dict]:
    """
    Клиенты в окне дат по убыванию выручки
    Равная выручка - порядок первого заказа клиента
    """
    purchases = catalog.extract(
        placed_between(start, end), lambda o: (o.customer_id, o.total)
    )
    spent = sum_by(purchases, lambda p: p[0], lambda p: p[1])
    counts = count_by(purchases, lambda p: p[0])
    totals = catalog.total_value_per_customer()

    return [
        {
            "customer_id": cid,
            "spent_in_period": total,
            "orders_in_period": counts[cid],
            "lifetime_value": totals.get(cid, 0.0),
        }
        for cid, total in sorted(spent.items(), key=lambda kv: -kv[1])
    ]


def category_report(catalog: OrderCatalog) -> List[dict]:
    """Категории по убыванию числа проданных товаров"""
    counts = catalog.sales_count_by_category()
    return [
        {"category": category, "items_sold": count}
        for category, count in sorted(counts.items(), key=lambda kv: -kv[1])
    ]


def status_breakdown(catalog: OrderCatalog, status: str) -> dict:
    """Заказы в заданном статусе и их выручка"""
    ids = catalog.extract(by_status(status), lambda o: o.id)
    # сначала фильтр по статусу, потом сумма
    status_revenue = pipe(
        lambda orders: tuple(filter(by_status(status), orders)), total_sales
    )
    revenue = status_revenue(catalog.orders)
    return {"status": status, "order_ids": ids, "revenue": revenue}


# ============ Отчёты по пользователям ============


def department_report(directory: UserDirectory) -> List[dict]:
    """Отделы по убыванию среднего возраста"""
    groups = directory.group_users_by_department()
    oldest = directory.get_oldest_user_by_department()

    return [
        {
            "department": dept,
            "headcount": len(groups[dept]),
            "average_age": round(avg_age, 2),
            "oldest": oldest[dept].name,
            "payroll": sum(u.salary for u in groups[dept]),
        }
        for dept, avg_age in directory.get_departments_sorted_by_average_age()
    ]


def salary_report(directory: UserDirectory) -> Dict[str, float]:
    """Средняя, минимальная и максимальная зарплата"""
    salaries = directory.map_users(lambda u: u.salary)
    return {
        "average_salary": directory.get_average_salary(),
        "min_salary": min(salaries, default=0.0),
        "max_salary": max(salaries, default=0.0),
        "average_age": directory.get_average_age(),
        "total_age": directory.get_total_age(),
    }


# ============ Композитный отчёт ============


def comprehensive_report(
    catalog: OrderCatalog,
    directory: UserDirectory,
    start: date,
    end: date,
    high_value_threshold: float = 100.0,
) -> dict:
    return {
        "sales": sales_summary(catalog, high_value_threshold),
        "daily_sales": catalog.daily_sales(start, end),
        "top_customer": catalog.top_customer(start, end).get_or_else(None),
        "customers": customer_report(catalog, start, end),
        "categories": category_report(catalog),
        "departments": department_report(directory),
        "salaries": salary_report(directory),
    }
