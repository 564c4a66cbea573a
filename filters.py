# filters.py - narrowing down lists that are already in memory
# "all" or an empty value always means "don't filter"

import calendar
from datetime import datetime, time, timedelta


def _is_blank(value):
    return not value or value == 'all'


def search_products(products, term):
    if not term:
        return list(products)
    term = term.lower()
    return [p for p in products
            if term in p.name.lower() or term in p.category.lower()]


def filter_products_by_category(products, category):
    if _is_blank(category):
        return list(products)
    return [p for p in products if p.category == category]


def search_sales(sales, term):
    if not term:
        return list(sales)
    term = term.lower()
    return [s for s in sales if term in (s.name or '').lower()]


def filter_sales_by_category(sales, category):
    if _is_blank(category):
        return list(sales)
    return [s for s in sales if s.category == category]


def filter_sales_by_range(sales, start_date=None, end_date=None):
    """Keep sales from the start of start_date to the last instant of end_date."""
    result = list(sales)
    if start_date:
        lower = datetime.combine(start_date, time.min)
        result = [s for s in result if s.date_sold >= lower]
    if end_date:
        upper = datetime.combine(end_date, time.max)
        result = [s for s in result if s.date_sold <= upper]
    return result


def _month_ago(day):
    year, month = (day.year - 1, 12) if day.month == 1 else (day.year, day.month - 1)
    last = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last))


PERIODS = ('all', 'today', 'week', 'month')


def filter_sales_by_period(sales, period, now=None):
    if _is_blank(period):
        return list(sales)
    if period not in PERIODS:
        raise ValueError(f'unknown period {period!r}')

    now = now or datetime.now()
    today = datetime.combine(now.date(), time.min)
    if period == 'today':
        since = today
    elif period == 'week':
        since = today - timedelta(days=7)
    else:
        since = _month_ago(today)
    return [s for s in sales if s.date_sold >= since]
