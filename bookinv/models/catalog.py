from bookinv.extensions import db
from .base import BaseModel


class Category(BaseModel):
    """图书分类"""
    __tablename__ = 'categories'
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text)

    products = db.relationship('Product', backref='category', lazy='dynamic')


class Product(BaseModel):
    """图书 (商品主表)"""
    __tablename__ = 'products'

    title = db.Column(db.String(256), nullable=False, index=True)
    author = db.Column(db.String(128))
    edition = db.Column(db.String(64))
    isbn = db.Column(db.String(32), index=True)
    sku = db.Column(db.String(64), unique=True, index=True)
    description = db.Column(db.Text)

    # 库存低于或等于该值时视为低库存
    reorder_level = db.Column(db.Integer, default=10, nullable=False)

    category_id = db.Column(db.String(36), db.ForeignKey('categories.id'))

    batches = db.relationship('Batch', backref='product', lazy='dynamic')

    @property
    def total_stock(self):
        return sum(b.quantity for b in self.batches)


class Supplier(BaseModel):
    """供应商"""
    __tablename__ = 'suppliers'

    name = db.Column(db.String(128), nullable=False, index=True)
    contact_person = db.Column(db.String(64))
    phone = db.Column(db.String(32))
    email = db.Column(db.String(128))
    address = db.Column(db.String(256))
    payment_terms = db.Column(db.String(128))
    notes = db.Column(db.Text)


class Campus(BaseModel):
    """校区 (销售发票的客户/结算主体)"""
    __tablename__ = 'campuses'

    name = db.Column(db.String(128), nullable=False, index=True)
    location = db.Column(db.String(256))
    contact_person = db.Column(db.String(64))
    phone = db.Column(db.String(32))
    email = db.Column(db.String(128))
