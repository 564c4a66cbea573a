# auth.py - accounts and the login gate
# flask-login reloads the user from the session cookie on every request,
# so "who is signed in" lives with the request, not in a module global

import logging

from flask_login import LoginManager
from sqlalchemy.exc import IntegrityError

from models import db, User
from store import ValidationError

log = logging.getLogger(__name__)

login_manager = LoginManager()
login_manager.login_view = 'signin'
login_manager.login_message = 'Please sign in to continue.'
login_manager.login_message_category = 'info'


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


def normalize_email(email):
    return (email or '').strip().lower()


def register_user(name, email, password):
    email = normalize_email(email)
    if User.query.filter_by(email=email).first():
        raise ValidationError('An account with this email already exists')

    user = User(name=name.strip(), email=email)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError('An account with this email already exists')
    log.info('account created id=%s email=%s', user.id, email)
    return user


def authenticate(email, password):
    user = User.query.filter_by(email=normalize_email(email)).first()
    if user and user.check_password(password or ''):
        return user
    log.warning('failed sign-in for %s', normalize_email(email))
    return None
