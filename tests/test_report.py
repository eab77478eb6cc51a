import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import logging
from datetime import date

import pytest
from Analytics_Service.report import (
    category_report,
    comprehensive_report,
    customer_report,
    department_report,
    salary_report,
    sales_summary,
    status_breakdown,
)
from lambda_lab.config import DEFAULT_SEED_PATH, Settings
from lambda_lab.logging_config import setup_logging
from lambda_lab.service import OrderCatalog, UserDirectory
from lambda_lab.transforms import load_seed

OCTOBER = (date(2025, 10, 1), date(2025, 10, 31))


@pytest.fixture
def catalog():
    """Свежие заказы на каждый тест: update_status меняет их на месте"""
    orders, _ = load_seed(DEFAULT_SEED_PATH)
    return OrderCatalog(orders)


@pytest.fixture
def directory():
    _, users = load_seed(DEFAULT_SEED_PATH)
    return UserDirectory(users)


def test_sales_summary(catalog):
    summary = sales_summary(catalog, high_value_threshold=100.0)
    assert summary["total_orders"] == 6
    assert summary["total_revenue"] == pytest.approx(419.0)
    assert summary["high_value_orders"] == 2
    assert summary["orders_by_status"] == {
        "PENDING": 2,
        "PAID": 2,
        "SHIPPED": 1,
        "CANCELLED": 1,
    }
    assert summary["most_ordered_product"] == "Mouse"


def test_sales_summary_empty_catalog():
    summary = sales_summary(OrderCatalog())
    assert summary["total_orders"] == 0
    assert summary["average_order_value"] == 0.0
    assert summary["most_ordered_product"] is None


def test_customer_report_window(catalog):
    report = customer_report(catalog, date(2025, 10, 1), date(2025, 10, 2))
    assert [r["customer_id"] for r in report] == ["c1", "c2"]
    assert report[0]["spent_in_period"] == pytest.approx(148.5)
    assert report[0]["orders_in_period"] == 2
    assert report[1]["lifetime_value"] == pytest.approx(70.5)


def test_category_report(catalog):
    report = category_report(catalog)
    assert report[0] == {"category": "Electronics", "items_sold": 4}
    assert {r["category"] for r in report} == {"Electronics", "Books", "Grocery", "Furniture"}


def test_status_breakdown(catalog):
    paid = status_breakdown(catalog, "PAID")
    assert paid["order_ids"] == ["o2", "o4"]
    assert paid["revenue"] == pytest.approx(225.0)


def test_department_report(directory):
    report = department_report(directory)
    assert [r["department"] for r in report] == ["Sales", "Engineering", "Marketing"]
    engineering = report[1]
    assert engineering["headcount"] == 3
    assert engineering["oldest"] == "Bob"
    assert engineering["payroll"] == pytest.approx(17700.0)


def test_salary_report(directory):
    report = salary_report(directory)
    assert report["min_salary"] == 3900.0
    assert report["max_salary"] == 6400.0
    assert report["total_age"] == 193


def test_comprehensive_report(catalog, directory):
    report = comprehensive_report(catalog, directory, *OCTOBER)
    assert report["top_customer"] == "c3"
    assert list(report["daily_sales"]) == [
        date(2025, 10, 1),
        date(2025, 10, 2),
        date(2025, 10, 3),
        date(2025, 10, 5),
    ]


# ============ Настройки и логирование ============


def test_settings_from_env():
    settings = Settings.from_env(
        {
            "LAMBDA_LAB_SEED_PATH": "/tmp/seed.json",
            "LAMBDA_LAB_LOG_LEVEL": "DEBUG",
            "LAMBDA_LAB_HIGH_VALUE_THRESHOLD": "42.5",
        }
    )
    assert settings.seed_path == "/tmp/seed.json"
    assert settings.log_level == "DEBUG"
    assert settings.log_file is None
    assert settings.high_value_threshold == 42.5


def test_settings_defaults():
    settings = Settings.from_env({})
    assert settings.seed_path == DEFAULT_SEED_PATH
    assert settings.high_value_threshold == 100.0


def test_setup_logging_configures_root_once(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    for handler in saved_handlers:
        root.removeHandler(handler)

    try:
        setup_logging("debug", str(tmp_path / "lab.log"))
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        setup_logging("error")
        assert len(root.handlers) == 2
        assert root.level == logging.DEBUG
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)


def test_service_logs_status_update(catalog, caplog):
    with caplog.at_level(logging.DEBUG, logger="lambda_lab.service"):
        catalog.update_status("o1", str.lower)
        catalog.update_status("missing", str.lower)
    messages = [r.getMessage() for r in caplog.records]
    assert "order o1 status PENDING -> pending" in messages
    assert "status update skipped: order missing not found" in messages


def test_status_breakdown_follows_status_updates(catalog):
    catalog.update_status("o1", str.lower)
    assert status_breakdown(catalog, "pending") == {
        "status": "pending",
        "order_ids": ["o1"],
        "revenue": pytest.approx(130.0),
    }
    assert status_breakdown(catalog, "NOPE")["revenue"] == 0.0
