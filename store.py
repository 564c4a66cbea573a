# store.py - data-access layer
# every read and write the pages make goes through here, and the same
# checks the forms run are repeated before anything touches the database

import logging
import math
from datetime import datetime, time

from sqlalchemy.exc import SQLAlchemyError

from models import db, Product, Sale

log = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for failures the pages report back to the user."""


class ValidationError(StoreError):
    pass


class InsufficientStockError(ValidationError):
    def __init__(self, product, requested):
        self.product = product
        self.requested = requested
        super().__init__(f'Not enough stock! Available: {product.quantity}')


class NotFoundError(StoreError):
    pass


PRODUCT_FIELDS = ('name', 'category', 'cost_price', 'selling_price', 'quantity')


def _check_product_fields(data):
    for field in ('name', 'category'):
        if field in data and not (data[field] or '').strip():
            raise ValidationError(f'{field.capitalize()} is required')
    for field in ('cost_price', 'selling_price'):
        value = data.get(field, 0)
        if value is None or not math.isfinite(value):
            raise ValidationError('Prices must be numbers')
        if value < 0:
            raise ValidationError('Prices cannot be negative')
    if 'quantity' in data:
        qty = data['quantity']
        if not isinstance(qty, int) or isinstance(qty, bool) or qty < 0:
            raise ValidationError('Quantity must be a whole number of 0 or more')


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


# ---------------------------------------------------------------- products

def list_products():
    return Product.query.order_by(Product.created_at.desc(), Product.id.desc()).all()


def get_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f'Product {product_id} not found')
    return product


def low_stock_products(threshold=10):
    return Product.query.filter(Product.quantity < threshold).order_by(Product.quantity).all()


def create_product(data):
    _check_product_fields(data)
    missing = [f for f in PRODUCT_FIELDS if f not in data]
    if missing:
        raise ValidationError(f'Missing fields: {", ".join(missing)}')
    product = Product(**{f: data[f] for f in PRODUCT_FIELDS})
    product.name = product.name.strip()
    product.category = product.category.strip()
    db.session.add(product)
    _commit()
    log.info('product created id=%s name=%r', product.id, product.name)
    return product


def update_product(product_id, data):
    product = get_product(product_id)
    _check_product_fields(data)
    for field in PRODUCT_FIELDS:
        if field in data:
            value = data[field]
            setattr(product, field, value.strip() if isinstance(value, str) else value)
    _commit()
    log.info('product updated id=%s', product.id)
    return product


def delete_product(product_id):
    product = get_product(product_id)
    name = product.name
    # past sales keep their snapshot but lose the link
    Sale.query.filter_by(product_id=product.id).update({'product_id': None})
    db.session.delete(product)
    _commit()
    log.info('product deleted id=%s name=%r', product_id, name)


def adjust_stock(product_id, adjustment):
    product = get_product(product_id)
    new_quantity = product.quantity + adjustment
    if new_quantity < 0:
        raise ValidationError('Stock cannot be negative')
    product.quantity = new_quantity
    _commit()
    log.info('stock adjusted id=%s by %+d to %d', product.id, adjustment, new_quantity)
    return product


# ------------------------------------------------------------------- sales

def list_sales(limit=100):
    return Sale.query.order_by(Sale.date_sold.desc(), Sale.id.desc()).limit(limit).all()


def get_sale(sale_id):
    sale = db.session.get(Sale, sale_id)
    if sale is None:
        raise NotFoundError(f'Sale {sale_id} not found')
    return sale


def sales_between(start, end):
    return (Sale.query
            .filter(Sale.date_sold >= start, Sale.date_sold <= end)
            .order_by(Sale.date_sold.desc())
            .all())


def sales_today(now=None):
    now = now or datetime.now()
    midnight = datetime.combine(now.date(), time.min)
    return Sale.query.filter(Sale.date_sold >= midnight).order_by(Sale.date_sold.desc()).all()


def record_sale(product_id, quantity, date_sold=None):
    """Create a sale and take its units off the product's stock.

    Both writes go out in a single commit, so either the sale exists and
    stock is reduced, or neither happened. Stock is checked against the
    row as loaded inside this transaction, not the page's copy.
    """
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise ValidationError('Quantity must be greater than 0')

    try:
        product = db.session.get(Product, product_id, with_for_update=True)
        if product is None:
            raise NotFoundError(f'Product {product_id} not found')
        if quantity > product.quantity:
            raise InsufficientStockError(product, quantity)

        total_sales = product.selling_price * quantity
        total_cost = product.cost_price * quantity
        sale = Sale(
            product_id=product.id,
            product_name=product.name,
            product_category=product.category,
            quantity_sold=quantity,
            total_sales=total_sales,
            total_cost=total_cost,
            profit=total_sales - total_cost,
            date_sold=date_sold or datetime.now(),
        )
        product.quantity -= quantity
        db.session.add(sale)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    log.info('sale recorded id=%s product=%s qty=%d total=%.2f',
             sale.id, product.id, quantity, total_sales)
    return sale


def delete_sale(sale_id):
    """Delete a sale and put its units back on the shelf, in one commit."""
    try:
        sale = db.session.get(Sale, sale_id)
        if sale is None:
            raise NotFoundError(f'Sale {sale_id} not found')
        restored = sale.quantity_sold
        product = None
        if sale.product_id is not None:
            product = db.session.get(Product, sale.product_id, with_for_update=True)
        if product is not None:
            product.quantity += restored
        db.session.delete(sale)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    if product is None:
        log.warning('sale deleted id=%s, product gone so no stock restored', sale_id)
    else:
        log.info('sale deleted id=%s, restored %d to product %s', sale_id, restored, product.id)
