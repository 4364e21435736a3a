from bookinv.extensions import db
from .base import BaseModel


class SystemSetting(BaseModel):
    """系统设置 (单行表：公司信息、仓库地址、币种)"""
    __tablename__ = 'system_settings'

    company_name = db.Column(db.String(128))
    company_address = db.Column(db.String(256))
    company_phone = db.Column(db.String(32))
    company_email = db.Column(db.String(128))
    warehouse_name = db.Column(db.String(128))
    warehouse_address = db.Column(db.String(256))
    tax_rate = db.Column(db.Float, default=0.0)
    currency = db.Column(db.String(8))
