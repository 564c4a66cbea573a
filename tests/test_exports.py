import csv
import io
from datetime import date, datetime
from types import SimpleNamespace

import exports


def parse(text):
    assert text.startswith('\ufeff')
    return list(csv.reader(io.StringIO(text[1:])))


def test_names_with_commas_and_quotes_survive():
    products = [SimpleNamespace(name='Widget, Inc.', category='Tools "Pro"',
                                cost_price=100, selling_price=150, quantity=20)]
    rows = parse(exports.to_csv(exports.INVENTORY_HEADERS, exports.inventory_rows(products)))

    assert rows[0] == exports.INVENTORY_HEADERS
    assert rows[1] == ['Widget, Inc.', 'Tools "Pro"', '100.00', '150.00', '20', '50.00', '2000.00']


def test_inventory_report_rows():
    products = [SimpleNamespace(name='Mug', category='Kitchen', cost_price=2.5,
                                selling_price=4, quantity=3)]
    assert list(exports.inventory_report_rows(products)) == [
        ['Mug', 'Kitchen', '2.50', '4.00', 3, '7.50', '12.00']]


def test_sales_rows_format_date_and_time():
    sales = [SimpleNamespace(name='Pen', category='Stationery', quantity_sold=5,
                             total_sales=750, total_cost=500, profit=250,
                             date_sold=datetime(2026, 3, 4, 15, 7))]
    rows = parse(exports.to_csv(exports.SALES_HEADERS, exports.sales_rows(sales)))
    assert rows[1] == ['03/04/2026', '03:07 PM', 'Pen', 'Stationery', '5', '750.00', '500.00', '250.00']


def test_profit_rows_show_na_for_zero_revenue():
    perf = [{'name': 'Pen', 'quantity': 5, 'revenue': 750, 'cost': 500, 'profit': 250, 'margin': 100 / 3},
            {'name': 'Freebie', 'quantity': 1, 'revenue': 0, 'cost': 0, 'profit': 0, 'margin': None}]
    assert list(exports.profit_rows(perf)) == [
        ['Pen', 5, '750.00', '500.00', '250.00', '33.33%'],
        ['Freebie', 1, '0.00', '0.00', '0.00', 'N/A'],
    ]


def test_filename_for():
    assert exports.filename_for('profit_report', date(2026, 10, 19)) == 'profit_report_2026-10-19.csv'
