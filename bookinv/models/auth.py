from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from bookinv.extensions import db
from .base import BaseModel


class User(UserMixin, BaseModel):
    """用户 (角色：admin / user)"""
    __tablename__ = 'users'

    ROLE_ADMIN = 'admin'
    ROLE_USER = 'user'

    email = db.Column(db.String(128), unique=True, index=True, nullable=False)
    username = db.Column(db.String(64), index=True)
    password_hash = db.Column(db.String(256))
    role = db.Column(db.String(16), default=ROLE_USER, nullable=False)
    is_active_user = db.Column(db.Boolean, default=True)
    last_login = db.Column(db.DateTime)

    @property
    def password(self):
        raise AttributeError('密码不可读')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        return check_password_hash(self.password_hash, password)

    def has_role(self, role):
        return self.role == role

    @property
    def is_admin(self):
        return self.has_role(self.ROLE_ADMIN)

    # Flask-Login 必须属性覆盖
    @property
    def is_active(self):
        return bool(self.is_active_user) and not self.is_deleted

    def __repr__(self):
        return f'<User {self.email}>'
