import sys
import os
import streamlit as st
from datetime import date

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from lambda_lab.config import settings
from lambda_lab.logging_config import setup_logging
from lambda_lab.compose import comparing, reverse_order, then_comparing
from lambda_lab.service import OrderCatalog, UserDirectory
from lambda_lab.transforms import (
    advance_status,
    by_age_range,
    by_customer,
    by_department,
    load_seed,
    resolve_period,
    set_status,
)
from Analytics_Service.report import (
    sales_summary,
    customer_report,
    category_report,
    department_report,
    salary_report,
)

STATUS_FLOW = {"PENDING": "PAID", "PAID": "SHIPPED", "SHIPPED": "DELIVERED"}

ORDER_SORTS = {
    "По дате": comparing(lambda o: o.order_date),
    "По сумме (убыв.)": reverse_order(comparing(lambda o: o.total)),
    "По клиенту, затем по дате": then_comparing(
        comparing(lambda o: o.customer_id), comparing(lambda o: o.order_date)
    ),
}

USER_SORTS = {
    "По имени": comparing(lambda u: u.name),
    "По возрасту": comparing(lambda u: u.age),
    "По зарплате (убыв.)": reverse_order(comparing(lambda u: u.salary)),
}


# ============ Кэширование данных ============
@st.cache_data
def get_data(path: str):
    return load_seed(path)


# ============ Инициализация ============
setup_logging(settings.log_level, settings.log_file)

st.set_page_config(
    page_title="Lambda Lab",
    page_icon="🧮",
    layout="wide",
    initial_sidebar_state="expanded",
)

orders, users = get_data(settings.seed_path)

# Сервисы живут в session_state, чтобы смена статуса переживала rerun
if "catalog" not in st.session_state:
    st.session_state.catalog = OrderCatalog(orders)
if "directory" not in st.session_state:
    st.session_state.directory = UserDirectory(users)

catalog: OrderCatalog = st.session_state.catalog
directory: UserDirectory = st.session_state.directory


def format_money(amount: float) -> str:
    return f"{amount:,.2f}"


def order_rows(items):
    return [
        {
            "id": o.id,
            "date": o.order_date.isoformat(),
            "customer": o.customer_id,
            "items": len(o.products),
            "total": o.total,
            "status": o.status,
        }
        for o in items
    ]


def user_rows(items):
    return [
        {"name": u.name, "age": u.age, "department": u.department, "salary": u.salary}
        for u in items
    ]


# ============ HEADER ============
st.title("🧮 Lambda Lab: заказы и сотрудники")
st.caption("Фильтрация, группировка, агрегация и сортировка коллекций")

with st.sidebar:
    st.header("📂 Навигация")
    page = st.radio(
        "Раздел:",
        ["🧾 Заказы", "👥 Сотрудники", "📑 Отчёты"],
        label_visibility="collapsed",
    )
    st.divider()
    all_dates = sorted({o.order_date for o in catalog.orders}) or [date.today()]
    period = st.date_input("Период", value=(all_dates[0], all_dates[-1]))
    start, end = resolve_period(period, (all_dates[0], all_dates[-1]))


# ============ PAGE: ЗАКАЗЫ ============
if page == "🧾 Заказы":
    st.header("🧾 Заказы")

    summary = sales_summary(catalog, settings.high_value_threshold)
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Заказов", summary["total_orders"])
    with col2:
        st.metric("Выручка", format_money(summary["total_revenue"]))
    with col3:
        st.metric("Средний чек", format_money(summary["average_order_value"]))
    with col4:
        st.metric("Хит продаж", summary["most_ordered_product"] or "—")

    st.divider()

    sort_name = st.selectbox("Сортировка", list(ORDER_SORTS))
    st.dataframe(order_rows(catalog.sorted(ORDER_SORTS[sort_name])))

    tab1, tab2, tab3 = st.tabs(["💰 Крупные заказы", "📅 По дням", "🔄 Статус"])

    with tab1:
        threshold = st.number_input(
            "Порог суммы (строго больше)", value=settings.high_value_threshold
        )
        st.dataframe(order_rows(catalog.find_high_value_orders(threshold)))

    with tab2:
        daily = catalog.daily_sales(start, end)
        if daily:
            st.bar_chart({d.isoformat(): total for d, total in daily.items()})
        else:
            st.info("В выбранном периоде заказов нет")

        top = catalog.top_customer(start, end)
        st.write(f"🏆 Лучший клиент периода: **{top.get_or_else('—')}**")

        customer = st.selectbox(
            "Заказы клиента", sorted(catalog.total_value_per_customer())
        )
        if customer:
            ids = catalog.extract(by_customer(customer), lambda o: o.id)
            st.write(", ".join(ids))

    with tab3:
        order_id = st.selectbox("Заказ", [o.id for o in catalog.orders])
        col1, col2 = st.columns(2)
        with col1:
            if st.button("➡️ Следующий статус"):
                catalog.update_status(order_id, advance_status(STATUS_FLOW))
                st.rerun()
        with col2:
            if st.button("❌ Отменить"):
                catalog.update_status(order_id, set_status("CANCELLED"))
                st.rerun()


# ============ PAGE: СОТРУДНИКИ ============
elif page == "👥 Сотрудники":
    st.header("👥 Сотрудники")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Всего", len(directory))
    with col2:
        st.metric("Средний возраст", f"{directory.get_average_age():.1f}")
    with col3:
        st.metric("Средняя зарплата", format_money(directory.get_average_salary()))

    sort_name = st.selectbox("Сортировка справочника", list(USER_SORTS))
    if st.button("Пересортировать"):
        directory.sort_users(USER_SORTS[sort_name])
    st.dataframe(user_rows(directory.get_users()))

    st.divider()

    min_age, max_age = st.slider("Возраст", 18, 70, (25, 40))
    departments = sorted(directory.group_users_by_department())
    dept = st.selectbox("Отдел", ["Все"] + departments)
    in_range = by_age_range(min_age, max_age)
    predicate = (
        in_range
        if dept == "Все"
        else (lambda u: in_range(u) and by_department(dept)(u))
    )
    st.dataframe(user_rows(directory.filter_users_1(predicate)))

    name = st.text_input("Поиск по имени")
    if name:
        found = directory.find_user_by_name(name)
        if found.is_some():
            st.success(f"{found.value.name}, {found.value.age}, {found.value.department}")
        else:
            st.warning("Не найдено")

    longest = directory.get_user_with_longest_name()
    st.caption(
        f"Самое длинное имя: {longest.map(lambda u: u.name).get_or_else('—')} · "
        f"Все: {directory.get_all_user_names_to_string()}"
    )


# ============ PAGE: ОТЧЁТЫ ============
elif page == "📑 Отчёты":
    st.header("📑 Отчёты")

    st.subheader("Клиенты за период")
    st.dataframe(customer_report(catalog, start, end))

    st.subheader("Продажи по категориям")
    st.dataframe(category_report(catalog))

    st.subheader("Отделы")
    st.dataframe(department_report(directory))

    st.subheader("Зарплаты")
    st.json(salary_report(directory))
