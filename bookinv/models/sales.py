"""销售管理模型"""
from bookinv.extensions import db
from .base import BaseModel


class SalesInvoice(BaseModel):
    """销售发票头"""
    __tablename__ = 'sales_invoices'

    STATUS_PENDING = 'pending'
    STATUS_PARTIAL = 'partial'
    STATUS_PAID = 'paid'

    invoice_number = db.Column(db.String(32), unique=True, index=True, nullable=False)
    campus_id = db.Column(db.String(36), db.ForeignKey('campuses.id'), nullable=False)
    invoice_date = db.Column(db.Date, nullable=False)

    subtotal = db.Column(db.Float, nullable=False, default=0.0)
    discount_percentage = db.Column(db.Float, default=0.0)
    discount_amount = db.Column(db.Float, default=0.0)
    total_amount = db.Column(db.Float, nullable=False, default=0.0)
    paid_amount = db.Column(db.Float, default=0.0)

    status = db.Column(db.String(20), default=STATUS_PENDING, index=True)
    notes = db.Column(db.Text)

    # 关系
    campus = db.relationship('Campus')
    items = db.relationship('SalesItem', backref='invoice', cascade='all, delete-orphan',
                            order_by='SalesItem.created_at')

    @property
    def balance_due(self):
        return (self.total_amount or 0) - (self.paid_amount or 0)


class SalesItem(BaseModel):
    """销售明细行 (绑定到具体批次)"""
    __tablename__ = 'sales_items'

    sales_invoice_id = db.Column(db.String(36), db.ForeignKey('sales_invoices.id'), nullable=False)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id'), nullable=False)
    batch_id = db.Column(db.String(36), db.ForeignKey('batches.id'), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Float, nullable=False)
    unit_cost = db.Column(db.Float, nullable=False)  # 销售时从批次复制的成本价快照
    total_price = db.Column(db.Float, nullable=False)
    profit = db.Column(db.Float, nullable=False)

    product = db.relationship('Product')
    batch = db.relationship('Batch')
