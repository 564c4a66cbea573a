# exports.py - csv downloads for inventory, sales and profit reports

import csv
import io
from datetime import date

from flask import Response

import metrics

BOM = '\ufeff'  # lets spreadsheet apps detect utf-8

INVENTORY_HEADERS = ['Product Name', 'Category', 'Cost Price', 'Selling Price',
                     'Quantity', 'Profit per Item', 'Stock Value']
INVENTORY_REPORT_HEADERS = ['Product Name', 'Category', 'Cost Price', 'Selling Price',
                            'Quantity', 'Stock Value', 'Potential Revenue']
SALES_HEADERS = ['Date', 'Time', 'Product', 'Category', 'Quantity Sold',
                 'Total Sales', 'Cost of Goods', 'Profit']
SALES_REPORT_HEADERS = ['Date', 'Time', 'Product', 'Category', 'Quantity',
                        'Revenue', 'Cost', 'Profit']
PROFIT_HEADERS = ['Product', 'Units Sold', 'Total Revenue', 'Total Cost',
                  'Total Profit', 'Profit Margin']


def money(value):
    return f'{value:.2f}'


def margin_text(margin):
    return 'N/A' if margin is None else f'{margin:.2f}%'


def inventory_rows(products):
    for p in products:
        yield [p.name, p.category, money(p.cost_price), money(p.selling_price), p.quantity,
               money(metrics.profit_per_item(p)), money(metrics.stock_value(p))]


def inventory_report_rows(products):
    for p in products:
        yield [p.name, p.category, money(p.cost_price), money(p.selling_price), p.quantity,
               money(metrics.stock_value(p)), money(metrics.potential_revenue(p))]


def sales_rows(sales):
    for s in sales:
        yield [s.date_sold.strftime('%m/%d/%Y'), s.date_sold.strftime('%I:%M %p'),
               s.name or 'Unknown', s.category or 'N/A', s.quantity_sold,
               money(s.total_sales), money(s.total_cost), money(s.profit)]


def profit_rows(performance):
    for row in performance:
        yield [row['name'], row['quantity'], money(row['revenue']), money(row['cost']),
               money(row['profit']), margin_text(row['margin'])]


def to_csv(headers, rows):
    """Render a header row plus data rows, quoting any field that needs it."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator='\n')
    writer.writerow(headers)
    writer.writerows(rows)
    return BOM + buf.getvalue()


def filename_for(prefix, today=None):
    today = today or date.today()
    return f'{prefix}_{today.isoformat()}.csv'


def csv_response(headers, rows, prefix):
    resp = Response(to_csv(headers, rows), mimetype='text/csv')
    resp.headers['Content-Type'] = 'text/csv; charset=utf-8'
    resp.headers['Content-Disposition'] = f'attachment; filename="{filename_for(prefix)}"'
    return resp
