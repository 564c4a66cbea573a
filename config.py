# config.py - application settings, read from the environment
# flask loads these with app.config.from_object()

import os


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'smartstock-dev-key')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///smartstock.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # business rules
    LOW_STOCK_THRESHOLD = int(os.environ.get('LOW_STOCK_THRESHOLD', 10))
    TREND_DAYS = int(os.environ.get('TREND_DAYS', 7))

    # how many sales each page pulls from the store
    SALES_PAGE_LIMIT = int(os.environ.get('SALES_PAGE_LIMIT', 100))
    REPORTS_SALES_LIMIT = int(os.environ.get('REPORTS_SALES_LIMIT', 500))

    DASHBOARD_TOP_N = 5
    REPORTS_TOP_N = 10

    CURRENCY_SYMBOL = os.environ.get('CURRENCY_SYMBOL', '₱')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
