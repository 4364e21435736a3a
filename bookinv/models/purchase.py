"""采购管理模型"""
from bookinv.extensions import db
from .base import BaseModel


class PurchaseOrder(BaseModel):
    """采购订单"""
    __tablename__ = 'purchase_orders'

    STATUS_PENDING = 'pending'      # 待收货
    STATUS_RECEIVED = 'received'    # 已收货 (终态)

    po_number = db.Column(db.String(32), unique=True, index=True, nullable=False)
    supplier_id = db.Column(db.String(36), db.ForeignKey('suppliers.id'), nullable=False)

    order_date = db.Column(db.Date, nullable=False)
    expected_delivery = db.Column(db.Date)
    received_date = db.Column(db.DateTime)

    total_amount = db.Column(db.Float, default=0.0)
    status = db.Column(db.String(20), default=STATUS_PENDING, index=True)
    notes = db.Column(db.Text)

    # 关系
    supplier = db.relationship('Supplier')
    items = db.relationship('PurchaseOrderItem', backref='order', cascade='all, delete-orphan',
                            order_by='PurchaseOrderItem.created_at')
    batches = db.relationship('Batch', backref='purchase_order')

    @property
    def is_received(self):
        return self.status == self.STATUS_RECEIVED


class PurchaseOrderItem(BaseModel):
    """采购订单明细"""
    __tablename__ = 'purchase_items'

    purchase_order_id = db.Column(db.String(36), db.ForeignKey('purchase_orders.id'), nullable=False)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id'), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Float, nullable=False)  # 采购单价 = 批次成本价
    total_price = db.Column(db.Float, nullable=False)

    product = db.relationship('Product')
