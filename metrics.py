# metrics.py - dashboard and report numbers
# pure functions over lists already pulled from the store, no database access here.
# products need .name .category .cost_price .selling_price .quantity
# sales need .name .category .quantity_sold .total_sales .total_cost .profit .date_sold

from collections import OrderedDict
from datetime import date, datetime, timedelta


def inventory_value(products):
    return sum(p.cost_price * p.quantity for p in products)


def stock_value(product):
    return product.cost_price * product.quantity


def potential_revenue(product):
    return product.selling_price * product.quantity


def profit_per_item(product):
    return product.selling_price - product.cost_price


def low_stock(products, threshold=10):
    return [p for p in products if p.quantity < threshold]


def unique_categories(products):
    return list(OrderedDict.fromkeys(p.category for p in products))


def category_distribution(products):
    """Count products per category, in the order categories first appear."""
    counts = OrderedDict()
    for p in products:
        counts[p.category] = counts.get(p.category, 0) + 1
    return [{'name': name, 'value': value} for name, value in counts.items()]


def profit_margin(profit, revenue):
    """Profit as a percentage of revenue, or None when nothing was sold."""
    if not revenue:
        return None
    return profit / revenue * 100


def sales_totals(sales):
    totals = {'revenue': 0.0, 'cost': 0.0, 'profit': 0.0, 'transactions': 0}
    for s in sales:
        totals['revenue'] += s.total_sales
        totals['cost'] += s.total_cost
        totals['profit'] += s.profit
        totals['transactions'] += 1
    return totals


def sales_on_day(sales, day):
    return [s for s in sales if s.date_sold.date() == day]


def _empty_bucket(day):
    return {'date': day, 'revenue': 0.0, 'cost': 0.0, 'profit': 0.0, 'transactions': 0}


def _add_to_bucket(bucket, sale):
    bucket['revenue'] += sale.total_sales
    bucket['cost'] += sale.total_cost
    bucket['profit'] += sale.profit
    bucket['transactions'] += 1


def daily_trend(sales, start, end):
    """One bucket per calendar day from start to end inclusive.

    Days run local midnight to midnight; days with no sales still get a
    zero bucket so charts have no gaps.
    """
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()

    buckets = OrderedDict()
    day = start
    while day <= end:
        buckets[day] = _empty_bucket(day)
        day += timedelta(days=1)

    for s in sales:
        bucket = buckets.get(s.date_sold.date())
        if bucket is not None:
            _add_to_bucket(bucket, s)
    return list(buckets.values())


def last_days_trend(sales, today=None, days=7):
    today = today or date.today()
    if isinstance(today, datetime):
        today = today.date()
    return daily_trend(sales, today - timedelta(days=days - 1), today)


def sales_by_day(sales):
    """Buckets only for days that had sales, oldest first, rounded to cents."""
    buckets = {}
    for s in sales:
        day = s.date_sold.date()
        if day not in buckets:
            buckets[day] = _empty_bucket(day)
        _add_to_bucket(buckets[day], s)

    result = []
    for day in sorted(buckets):
        bucket = buckets[day]
        for key in ('revenue', 'cost', 'profit'):
            bucket[key] = round(bucket[key], 2)
        result.append(bucket)
    return result


def product_performance(sales):
    groups = {}
    for s in sales:
        name = s.name or 'Unknown'
        row = groups.setdefault(name, {
            'name': name, 'quantity': 0, 'revenue': 0.0, 'cost': 0.0, 'profit': 0.0,
        })
        row['quantity'] += s.quantity_sold
        row['revenue'] += s.total_sales
        row['cost'] += s.total_cost
        row['profit'] += s.profit
    for row in groups.values():
        row['margin'] = profit_margin(row['profit'], row['revenue'])
    return list(groups.values())


def top_products(sales, limit=5, by='revenue'):
    """Best sellers by revenue or by units; equal scores are ordered by name."""
    if by not in ('revenue', 'quantity'):
        raise ValueError(f'cannot rank products by {by!r}')
    rows = product_performance(sales)
    rows.sort(key=lambda r: (-r[by], r['name']))
    return rows[:limit]


def dashboard_metrics(products, sales, now=None, threshold=10):
    now = now or datetime.now()
    todays = sales_on_day(sales, now.date())
    return {
        'total_inventory_value': inventory_value(products),
        'total_products': len(products),
        'sales_today': sum(s.total_sales for s in todays),
        'profit_today': sum(s.profit for s in todays),
        'low_stock_count': len(low_stock(products, threshold)),
    }
