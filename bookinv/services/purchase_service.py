"""采购管理服务"""
import logging
import uuid
from datetime import date, datetime
from sqlalchemy import update
from bookinv.extensions import db
from bookinv.exceptions import ValidationError, NotFoundError, InvalidStateError
from bookinv.models.purchase import PurchaseOrder, PurchaseOrderItem
from bookinv.models.stock import Batch, InventoryLog
from bookinv.models.catalog import Product, Supplier
from bookinv.services.inventory_service import invalidate_product_batches
from bookinv.utils.parsing import to_int, to_float, to_date, blank_to_none

logger = logging.getLogger(__name__)


class PurchaseService:
    """采购服务"""

    @staticmethod
    def generate_po_number():
        """生成采购单号 (基于时间)"""
        time_str = datetime.now().strftime('%Y%m%d%H%M%S')
        random_str = uuid.uuid4().hex[:4].upper()
        return f"PO-{time_str}-{random_str}"

    @staticmethod
    def _normalize_items(items_data):
        """
        校验采购明细
        :param items_data: [{'product_id': '...', 'quantity': 10, 'unit_price': 50.0}, ...]
        """
        if not items_data:
            raise ValidationError('请至少添加一个采购商品')

        items = []
        for idx, raw in enumerate(items_data, start=1):
            product_id = blank_to_none(raw.get('product_id'))
            if not product_id:
                raise ValidationError(f'第 {idx} 行未选择图书')
            product = db.session.get(Product, product_id)
            if product is None or product.is_deleted:
                raise NotFoundError(f'图书不存在: {product_id}')

            items.append({
                'product': product,
                'quantity': to_int(raw.get('quantity'), f'第 {idx} 行数量', minimum=1),
                'unit_price': to_float(raw.get('unit_price'), f'第 {idx} 行单价', minimum=0),
            })
        return items

    @staticmethod
    def create_purchase_order(supplier_id, order_date, items_data, expected_delivery=None, notes=None):
        """
        创建采购订单 (状态 pending)
        total_amount = Σ 数量 × 单价
        """
        supplier = db.session.get(Supplier, supplier_id) if supplier_id else None
        if supplier is None or supplier.is_deleted:
            raise ValidationError('请选择有效的供应商')
        order_date = to_date(order_date, '下单日期')
        expected_delivery = to_date(expected_delivery, '预计到货日期', required=False)
        items = PurchaseService._normalize_items(items_data)

        try:
            po = PurchaseOrder(
                po_number=PurchaseService.generate_po_number(),
                supplier_id=supplier.id,
                order_date=order_date,
                expected_delivery=expected_delivery,
                notes=blank_to_none(notes),
                status=PurchaseOrder.STATUS_PENDING
            )
            db.session.add(po)

            total = 0.0
            for item in items:
                line_total = round(item['quantity'] * item['unit_price'], 2)
                po.items.append(PurchaseOrderItem(
                    product_id=item['product'].id,
                    quantity=item['quantity'],
                    unit_price=item['unit_price'],
                    total_price=line_total
                ))
                total += line_total

            po.total_amount = round(total, 2)
            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.exception('创建采购订单失败')
            raise

        logger.info(f'采购订单 {po.po_number} 已创建，共 {len(items)} 行，金额 {po.total_amount:.2f}')
        return po

    @staticmethod
    def get_order(po_id):
        po = db.session.get(PurchaseOrder, po_id) if po_id else None
        if po is None:
            raise NotFoundError(f'采购单不存在: {po_id}')
        return po

    @staticmethod
    def list_orders(status=None, supplier_id=None):
        query = PurchaseOrder.query
        if status:
            query = query.filter_by(status=status)
        if supplier_id:
            query = query.filter_by(supplier_id=supplier_id)
        return query.order_by(PurchaseOrder.created_at.desc()).all()

    @staticmethod
    def receive_order(po_id, batch_number, expiry_date=None):
        """
        收货入库 (整单，不支持部分收货)
        每个明细行生成一个批次和一条 stock_in 流水，然后订单置为 received。
        全部步骤在同一事务中，任一步失败整体回滚；已收货订单不可重复收货。
        状态用条件更新 (status == pending) 切换，并发收货只有一个能成功。
        """
        po = PurchaseService.get_order(po_id)
        if po.status != PurchaseOrder.STATUS_PENDING:
            raise InvalidStateError(f'采购单 {po.po_number} 当前状态为 {po.status}，不允许收货')

        batch_number = blank_to_none(batch_number)
        if not batch_number:
            raise ValidationError('批次号不能为空')
        expiry_date = to_date(expiry_date, '有效期', required=False)
        if not po.items:
            raise ValidationError(f'采购单 {po.po_number} 没有明细行')

        today = date.today()
        multi_line = len(po.items) > 1
        try:
            result = db.session.execute(
                update(PurchaseOrder)
                .where(PurchaseOrder.id == po.id, PurchaseOrder.status == PurchaseOrder.STATUS_PENDING)
                .values(status=PurchaseOrder.STATUS_RECEIVED, received_date=datetime.utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise InvalidStateError(f'采购单 {po.po_number} 已被收货，不允许重复收货')

            for n, item in enumerate(po.items, start=1):
                batch = Batch(
                    batch_number=f'{batch_number}-{n}' if multi_line else batch_number,
                    product_id=item.product_id,
                    supplier_id=po.supplier_id,
                    purchase_order_id=po.id,
                    quantity=item.quantity,
                    cost_price=item.unit_price,
                    received_date=today,
                    expiry_date=expiry_date
                )
                db.session.add(batch)
                db.session.flush()  # 获取 batch.id

                db.session.add(InventoryLog(
                    product_id=item.product_id,
                    batch_id=batch.id,
                    quantity=item.quantity,
                    type=InventoryLog.TYPE_IN,
                    reference_type=InventoryLog.REF_PURCHASE_ORDER,
                    reference_id=po.id,
                    notes=f'采购入库 - {po.po_number}'
                ))

            db.session.commit()
            db.session.refresh(po)
        except InvalidStateError:
            db.session.rollback()
            raise
        except Exception:
            db.session.rollback()
            logger.exception(f'采购单 {po.po_number} 收货失败，已回滚')
            raise

        invalidate_product_batches(*[item.product_id for item in po.items])
        logger.info(f'采购单 {po.po_number} 已收货，生成 {len(po.items)} 个批次')
        return po

    @staticmethod
    def document_data(po, settings):
        """组装采购单 PDF 所需数据"""
        return {
            'po_number': po.po_number,
            'order_date': po.order_date,
            'supplier_name': po.supplier.name if po.supplier else '',
            'items': [{
                'product_title': item.product.title if item.product else '',
                'quantity': item.quantity,
                'unit_cost': item.unit_price,
                'total_cost': item.total_price,
            } for item in po.items],
            'total_amount': po.total_amount or 0.0,
            'company_name': settings.get('company_name'),
            'warehouse_address': settings.get('warehouse_address'),
            'currency': settings.get('currency'),
        }
