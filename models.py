# this file defines the database structure for smartstock
# it uses 3 tables: users for login, products for stock, and sales for transactions

from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime

db = SQLAlchemy()

# table 1: users - one account per email, password kept as a hash
class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(200), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.now)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.email}>'

# table 2: products - item details, prices and units on hand
class Product(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    cost_price = db.Column(db.Float, nullable=False)     # buying price from suppliers
    selling_price = db.Column(db.Float, nullable=False)  # price for customers
    quantity = db.Column(db.Integer, nullable=False, default=0)  # never below zero
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        db.CheckConstraint('quantity >= 0', name='ck_product_quantity'),
    )

    @property
    def stock_value(self):
        return self.cost_price * self.quantity

    @property
    def profit_per_item(self):
        return self.selling_price - self.cost_price

    def __repr__(self):
        return f'<Product {self.name}>'

# table 3: sales - a frozen snapshot of one transaction
# prices are copied in at sale time, so later product edits leave history alone
class Sale(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey('product.id', ondelete='SET NULL'), nullable=True)
    product_name = db.Column(db.String(200), nullable=False)
    product_category = db.Column(db.String(100), nullable=False)
    quantity_sold = db.Column(db.Integer, nullable=False)
    total_sales = db.Column(db.Float, nullable=False)  # qty * selling_price
    total_cost = db.Column(db.Float, nullable=False)   # qty * cost_price
    profit = db.Column(db.Float, nullable=False)       # sales - cost
    date_sold = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)
    created_at = db.Column(db.DateTime, default=datetime.now)

    product = db.relationship('Product', backref=db.backref('sales', lazy=True))

    # display the live product name when it still exists, else the snapshot
    @property
    def name(self):
        return self.product.name if self.product is not None else self.product_name

    @property
    def category(self):
        return self.product.category if self.product is not None else self.product_category

    def __repr__(self):
        return f'<Sale {self.quantity_sold} x {self.product_name}>'
