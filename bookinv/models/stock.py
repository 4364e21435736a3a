from bookinv.extensions import db
from .base import BaseModel


class Batch(BaseModel):
    """
    库存批次
    每次采购收货的一行生成一个批次，成本价在收货时固定；
    数量只会在销售时递减。
    """
    __tablename__ = 'batches'
    __table_args__ = (
        db.CheckConstraint('quantity >= 0', name='ck_batches_quantity_non_negative'),
    )

    batch_number = db.Column(db.String(64), nullable=False, index=True)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id'), nullable=False, index=True)
    supplier_id = db.Column(db.String(36), db.ForeignKey('suppliers.id'))
    purchase_order_id = db.Column(db.String(36), db.ForeignKey('purchase_orders.id'))

    quantity = db.Column(db.Integer, default=0, nullable=False)
    cost_price = db.Column(db.Float, nullable=False)
    received_date = db.Column(db.Date, nullable=False)
    expiry_date = db.Column(db.Date)

    supplier = db.relationship('Supplier')

    @property
    def total_value(self):
        return self.quantity * self.cost_price


class InventoryLog(BaseModel):
    """
    库存流水 (只追加)
    quantity 为带符号的变动量：入库为正，出库为负
    """
    __tablename__ = 'inventory_logs'

    TYPE_IN = 'stock_in'
    TYPE_OUT = 'stock_out'

    REF_PURCHASE_ORDER = 'purchase_order'
    REF_SALES_INVOICE = 'sales_invoice'

    product_id = db.Column(db.String(36), db.ForeignKey('products.id'), nullable=False, index=True)
    batch_id = db.Column(db.String(36), db.ForeignKey('batches.id'))
    quantity = db.Column(db.Integer, nullable=False)
    type = db.Column(db.String(20), nullable=False, index=True)

    reference_type = db.Column(db.String(32))
    reference_id = db.Column(db.String(36), index=True)
    notes = db.Column(db.String(255))

    product = db.relationship('Product')
    batch = db.relationship('Batch')
