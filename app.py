# app.py - builds the flask app and holds the page routes
# run the dev server with: flask --app app run
# load sample stock with: flask --app app seed-demo

import logging
from datetime import datetime, time, timedelta
from urllib.parse import urlsplit

from flask import Flask, render_template, request, redirect, url_for, flash, abort
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

import exports
import filters
import forms
import metrics
import store
from auth import login_manager, register_user, authenticate
from config import Config
from models import db, Product, Sale
from store import StoreError

log = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    dict(name='Matte Red Lipstick', category='Cosmetics', cost_price=450, selling_price=800, quantity=20),
    dict(name='Luxury Oud Perfume', category='Fragrance', cost_price=2500, selling_price=4500, quantity=3),
    dict(name='Gold Plated Necklace', category='Jewelry', cost_price=1200, selling_price=2500, quantity=10),
    dict(name='Canvas Tote Bag', category='Accessories', cost_price=300, selling_price=650, quantity=35),
]


def _safe_next(target):
    # only follow redirects that stay on this site
    if not target:
        return None
    parts = urlsplit(target)
    if parts.scheme or parts.netloc or not target.startswith('/'):
        return None
    return target


def _fail(action, exc):
    """Report a failed write back to the user."""
    if isinstance(exc, StoreError):
        log.warning('%s rejected: %s', action, exc)
        flash(str(exc), 'danger')
    else:
        log.exception('%s failed', action)
        flash(f'Failed to {action}', 'danger')


def inventory_view(args):
    products = store.list_products()
    shown = filters.search_products(products, args.get('q', ''))
    shown = filters.filter_products_by_category(shown, args.get('category', 'all'))
    return products, shown


def sales_view(args, limit):
    sales = store.list_sales(limit=limit)
    shown = filters.search_sales(sales, args.get('q', ''))
    period = args.get('period', 'all')
    if period not in filters.PERIODS:
        period = 'all'
    shown = filters.filter_sales_by_period(shown, period)
    return sales, shown


# query args the report pages carry over to their export links
REPORT_FILTER_KEYS = ('start', 'end', 'category', 'q', 'inventory_category')


def reports_view(args, limit, top_n):
    products = store.list_products()
    sales = store.list_sales(limit=limit)

    start = forms.parse_day(args.get('start'))
    end = forms.parse_day(args.get('end'))
    shown_sales = filters.filter_sales_by_range(sales, start, end)
    shown_sales = filters.filter_sales_by_category(shown_sales, args.get('category', 'all'))

    shown_products = filters.search_products(products, args.get('q', ''))
    shown_products = filters.filter_products_by_category(
        shown_products, args.get('inventory_category', 'all'))

    return {
        'products': products,
        'sales': sales,
        'filtered_sales': shown_sales,
        'filtered_products': shown_products,
        'categories': metrics.unique_categories(products),
        'totals': metrics.sales_totals(shown_sales),
        'daily': metrics.sales_by_day(shown_sales),
        'top_products': metrics.top_products(shown_sales, limit=top_n),
    }


def create_app(config_class=Config, overrides=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    db.init_app(app)
    login_manager.init_app(app)

    with app.app_context():
        db.create_all()

    @app.template_filter('currency')
    def currency(value):
        return f"{app.config['CURRENCY_SYMBOL']}{(value or 0):,.2f}"

    @app.template_filter('margin')
    def margin(value):
        return exports.margin_text(value)

    @app.context_processor
    def inject_settings():
        return {'low_stock_threshold': app.config['LOW_STOCK_THRESHOLD']}

    @app.cli.command('seed-demo')
    def seed_demo():
        """Add starter products when the inventory is empty."""
        if Product.query.count():
            print('Products already exist, nothing to do.')
            return
        for data in SAMPLE_PRODUCTS:
            store.create_product(data)
        print(f'Added {len(SAMPLE_PRODUCTS)} sample products.')

    # sign in, sign up, sign out
    @app.route('/signin', methods=['GET', 'POST'])
    def signin():
        if current_user.is_authenticated:
            return redirect(url_for('index'))
        if request.method == 'POST':
            user = authenticate(request.form.get('email'), request.form.get('password'))
            if user:
                login_user(user)
                log.info('user %s signed in', user.id)
                return redirect(_safe_next(request.args.get('next')) or url_for('index'))
            flash('Invalid email or password', 'danger')
        return render_template('signin.html')

    @app.route('/signup', methods=['GET', 'POST'])
    def signup():
        if current_user.is_authenticated:
            return redirect(url_for('index'))
        if request.method == 'POST':
            name = request.form.get('name', '')
            email = request.form.get('email', '')
            password = request.form.get('password', '')
            try:
                forms.validate_signup(name, email, password, request.form.get('confirm_password', ''))
                user = register_user(name, email, password)
            except StoreError as e:
                flash(str(e), 'danger')
                return render_template('signup.html', name=name, email=email,
                                       strength=forms.password_strength(password)), 400
            login_user(user)
            return redirect(url_for('index'))
        return render_template('signup.html')

    @app.route('/logout')
    @login_required
    def logout():
        log.info('user %s signed out', current_user.id)
        logout_user()
        return redirect(url_for('signin'))

    # dashboard
    @app.route('/')
    @login_required
    def index():
        now = datetime.now()
        days = app.config['TREND_DAYS']
        threshold = app.config['LOW_STOCK_THRESHOLD']
        window_start = datetime.combine(now.date() - timedelta(days=days - 1), time.min)
        window_end = datetime.combine(now.date(), time.max)

        products = store.list_products()
        recent = store.sales_between(window_start, window_end)
        return render_template(
            'dashboard.html',
            stats=metrics.dashboard_metrics(products, store.sales_today(now), now, threshold),
            low_stock=store.low_stock_products(threshold),
            categories=metrics.category_distribution(products),
            trend=metrics.last_days_trend(recent, now.date(), days),
            top_products=metrics.top_products(recent, limit=app.config['DASHBOARD_TOP_N']),
            latest_sales=recent[:5],
        )

    # inventory
    @app.route('/inventory', methods=['GET', 'POST'])
    @login_required
    def inventory():
        if request.method == 'POST':
            try:
                product = store.create_product(forms.parse_product_form(request.form))
                flash(f'{product.name} added to stock', 'success')
            except (StoreError, SQLAlchemyError) as e:
                _fail('add product', e)
            return redirect(url_for('inventory'))

        products, shown = inventory_view(request.args)
        return render_template(
            'inventory.html',
            products=shown,
            categories=metrics.unique_categories(products),
            total_products=len(products),
            total_value=metrics.inventory_value(products),
            low_count=len(metrics.low_stock(products, app.config['LOW_STOCK_THRESHOLD'])),
            q=request.args.get('q', ''),
            category=request.args.get('category', 'all'),
        )

    @app.route('/inventory/<int:id>/edit', methods=['GET', 'POST'])
    @login_required
    def edit_product(id):
        product = db.get_or_404(Product, id)
        if request.method == 'POST':
            try:
                store.update_product(id, forms.parse_product_form(request.form))
                flash(f'Changes saved for {product.name}', 'success')
                return redirect(url_for('inventory'))
            except (StoreError, SQLAlchemyError) as e:
                _fail('update product', e)
        return render_template('edit_product.html', item=product)

    @app.route('/inventory/<int:id>/delete', methods=['POST'])
    @login_required
    def delete_product(id):
        product = db.get_or_404(Product, id)
        name = product.name
        try:
            store.delete_product(id)
            flash(f'{name} deleted from the list.', 'warning')
        except (StoreError, SQLAlchemyError) as e:
            _fail('delete product', e)
        return redirect(url_for('inventory'))

    @app.route('/inventory/<int:id>/adjust', methods=['POST'])
    @login_required
    def adjust_stock(id):
        db.get_or_404(Product, id)
        try:
            store.adjust_stock(id, forms.parse_adjustment(request.form.get('adjustment')))
        except (StoreError, SQLAlchemyError) as e:
            _fail('adjust stock', e)
        return redirect(url_for('inventory'))

    @app.route('/inventory/export')
    @login_required
    def export_inventory():
        _, shown = inventory_view(request.args)
        return exports.csv_response(exports.INVENTORY_HEADERS, exports.inventory_rows(shown), 'inventory')

    # sales
    @app.route('/sales', methods=['GET', 'POST'])
    @login_required
    def sales():
        if request.method == 'POST':
            try:
                sale = store.record_sale(**forms.parse_sale_form(request.form))
                flash(f'Sale recorded: {sale.quantity_sold} {sale.product_name}', 'success')
            except (StoreError, SQLAlchemyError) as e:
                _fail('add sale', e)
            return redirect(url_for('sales'))

        _, shown = sales_view(request.args, app.config['SALES_PAGE_LIMIT'])
        return render_template(
            'sales.html',
            sales=shown,
            products=store.list_products(),
            totals=metrics.sales_totals(shown),
            q=request.args.get('q', ''),
            period=request.args.get('period', 'all'),
            now=datetime.now().strftime(forms.SALE_DATE_FORMAT),
        )

    @app.route('/sales/<int:id>/delete', methods=['POST'])
    @login_required
    def delete_sale(id):
        db.get_or_404(Sale, id)
        try:
            store.delete_sale(id)
            flash('Sale deleted, stock restored.', 'warning')
        except (StoreError, SQLAlchemyError) as e:
            _fail('delete sale', e)
        return redirect(url_for('sales'))

    @app.route('/sales/export')
    @login_required
    def export_sales():
        _, shown = sales_view(request.args, app.config['SALES_PAGE_LIMIT'])
        return exports.csv_response(exports.SALES_HEADERS, exports.sales_rows(shown), 'sales')

    # reports
    @app.route('/reports')
    @login_required
    def reports():
        report_type = request.args.get('type', 'sales')
        if report_type not in ('inventory', 'sales', 'profit'):
            report_type = 'sales'
        data = reports_view(request.args, app.config['REPORTS_SALES_LIMIT'], app.config['REPORTS_TOP_N'])
        export_args = {k: request.args[k] for k in REPORT_FILTER_KEYS if request.args.get(k)}
        return render_template('reports.html', report_type=report_type, args=request.args,
                               export_args=export_args, **data)

    @app.route('/reports/export/<kind>')
    @login_required
    def export_report(kind):
        data = reports_view(request.args, app.config['REPORTS_SALES_LIMIT'], app.config['REPORTS_TOP_N'])
        if kind == 'inventory':
            return exports.csv_response(exports.INVENTORY_REPORT_HEADERS,
                                        exports.inventory_report_rows(data['filtered_products']),
                                        'inventory_report')
        if kind == 'sales':
            return exports.csv_response(exports.SALES_REPORT_HEADERS,
                                        exports.sales_rows(data['filtered_sales']),
                                        'sales_report')
        if kind == 'profit':
            return exports.csv_response(exports.PROFIT_HEADERS,
                                        exports.profit_rows(data['top_products']),
                                        'profit_report')
        abort(404)

    return app


if __name__ == '__main__':
    create_app().run(debug=True, port=5001)
