"""库存批次服务"""
import logging
from datetime import date, datetime, timedelta
from flask import current_app
from sqlalchemy import update
from sqlalchemy.orm import joinedload
from bookinv.extensions import db, cache
from bookinv.exceptions import InsufficientStockError, NotFoundError, ValidationError
from bookinv.models.stock import Batch
from bookinv.services.report_service import ReportService

logger = logging.getLogger(__name__)

STOCK_OUT = 'out_of_stock'
STOCK_LOW = 'low_stock'
STOCK_OK = 'in_stock'

EXPIRY_EXPIRED = 'expired'
EXPIRY_SOON = 'expiring_soon'


@cache.memoize()
def product_batches(product_id):
    """
    按图书缓存的批次索引 (按需加载)
    任何改动该图书批次的操作之后必须调用 invalidate_product_batches
    """
    batches = Batch.query.filter_by(product_id=product_id).order_by(
        Batch.received_date.asc(), Batch.created_at.asc()
    ).all()
    return [b.to_dict() for b in batches]


def invalidate_product_batches(*product_ids):
    for product_id in set(product_ids):
        cache.delete_memoized(product_batches, product_id)


class InventoryService:
    @staticmethod
    def list_batches():
        """全部批次 (含图书与供应商)，按收货日期倒序"""
        return Batch.query.options(
            joinedload(Batch.product),
            joinedload(Batch.supplier)
        ).order_by(Batch.received_date.desc(), Batch.created_at.desc()).all()

    @staticmethod
    def get_batch(batch_id):
        batch = db.session.get(Batch, batch_id) if batch_id else None
        if batch is None:
            raise NotFoundError(f'批次不存在: {batch_id}')
        return batch

    @staticmethod
    def stock_status(quantity, reorder_level):
        if quantity == 0:
            return STOCK_OUT
        if quantity <= reorder_level:
            return STOCK_LOW
        return STOCK_OK

    @staticmethod
    def expiry_status(expiry_date, today=None, warning_days=None):
        """过期 / 临期 判断；无有效期返回 None"""
        if not expiry_date:
            return None
        today = today or date.today()
        if warning_days is None:
            warning_days = current_app.config.get('EXPIRY_WARNING_DAYS', 30)
        if expiry_date < today:
            return EXPIRY_EXPIRED
        if expiry_date < today + timedelta(days=warning_days):
            return EXPIRY_SOON
        return None

    @staticmethod
    def available_batches(product_id):
        """可售批次 (数量 > 0)，供销售开票选择"""
        return [b for b in product_batches(product_id) if b['quantity'] > 0]

    @staticmethod
    def product_summary(product_id):
        return ReportService.fold_batches(product_batches(product_id))

    @staticmethod
    def decrement_batch(batch_id, quantity):
        """
        原子扣减批次库存
        使用条件更新 (quantity >= 扣减量)，并发销售不会把库存扣成负数。
        不提交事务，由调用方统一提交或回滚。
        """
        if quantity <= 0:
            raise ValidationError('扣减数量必须大于 0')

        result = db.session.execute(
            update(Batch)
            .where(Batch.id == batch_id, Batch.quantity >= quantity)
            .values(quantity=Batch.quantity - quantity, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )

        # 条件更新绕过了 identity map，这里强制重新加载
        batch = db.session.get(Batch, batch_id, populate_existing=True)
        if result.rowcount != 1:
            if batch is None:
                raise NotFoundError(f'批次不存在: {batch_id}')
            raise InsufficientStockError(
                f'库存不足！批次 {batch.batch_number} 当前库存: {batch.quantity}, 尝试扣减: {quantity}'
            )
        logger.debug(f'批次 {batch.batch_number} 扣减 {quantity}，剩余 {batch.quantity}')
        return batch
