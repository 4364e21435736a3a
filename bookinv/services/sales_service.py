"""销售管理服务"""
import logging
import uuid
from datetime import datetime
from bookinv.extensions import db
from bookinv.exceptions import ValidationError, NotFoundError
from bookinv.models.sales import SalesInvoice, SalesItem
from bookinv.models.stock import Batch, InventoryLog
from bookinv.models.catalog import Campus
from bookinv.services.inventory_service import InventoryService, invalidate_product_batches
from bookinv.utils.parsing import to_int, to_float, to_date, blank_to_none

logger = logging.getLogger(__name__)


class SalesService:
    @staticmethod
    def generate_invoice_number():
        """生成发票号 (基于时间)"""
        time_str = datetime.now().strftime('%Y%m%d%H%M%S')
        random_str = uuid.uuid4().hex[:4].upper()
        return f"INV-{time_str}-{random_str}"

    @staticmethod
    def compute_totals(items, discount_percentage=0):
        """
        计算发票金额
        :param items: [{'quantity': 2, 'unit_price': 8.0}, ...]
        :return: (subtotal, discount_amount, total_amount)
        """
        subtotal = sum(item['quantity'] * item['unit_price'] for item in items)
        discount_amount = subtotal * (discount_percentage or 0) / 100
        total = subtotal - discount_amount
        return round(subtotal, 2), round(discount_amount, 2), round(total, 2)

    @staticmethod
    def resolve_status(paid_amount, total_amount):
        """开票时确定付款状态：已付 >= 应付 为 paid，否则 pending (开票路径不产生 partial)"""
        if (paid_amount or 0) >= total_amount:
            return SalesInvoice.STATUS_PAID
        return SalesInvoice.STATUS_PENDING

    @staticmethod
    def line_profit(unit_price, unit_cost, quantity):
        return round((unit_price - unit_cost) * quantity, 2)

    @staticmethod
    def _normalize_items(items_data):
        """
        校验销售明细：每行必须指定批次，且批次属于所选图书
        :param items_data: [{'product_id': '...', 'batch_id': '...', 'quantity': 4, 'unit_price': 8.0}, ...]
        """
        if not items_data:
            raise ValidationError('请至少添加一个销售商品')

        items = []
        for idx, raw in enumerate(items_data, start=1):
            batch_id = blank_to_none(raw.get('batch_id'))
            if not batch_id:
                raise ValidationError(f'第 {idx} 行未选择批次')
            batch = db.session.get(Batch, batch_id)
            if batch is None:
                raise NotFoundError(f'批次不存在: {batch_id}')
            if batch.product is None or batch.product.is_deleted:
                raise NotFoundError(f'第 {idx} 行批次 {batch.batch_number} 对应的图书已删除')

            product_id = blank_to_none(raw.get('product_id')) or batch.product_id
            if product_id != batch.product_id:
                raise ValidationError(f'第 {idx} 行批次 {batch.batch_number} 不属于所选图书')

            items.append({
                'batch': batch,
                'quantity': to_int(raw.get('quantity'), f'第 {idx} 行数量', minimum=1),
                'unit_price': to_float(raw.get('unit_price'), f'第 {idx} 行单价', minimum=0),
            })
        return items

    @staticmethod
    def create_invoice(campus_id, invoice_date, items_data, discount_percentage=0, paid_amount=0, notes=None):
        """
        创建销售发票并扣减库存
        1. 计算小计/折扣/总额与付款状态
        2. 逐行：原子扣减批次库存、写入明细 (成本价快照与利润)、追加 stock_out 流水
        全部步骤在同一事务中，库存不足或任何写入失败都会整体回滚。
        """
        campus = db.session.get(Campus, campus_id) if campus_id else None
        if campus is None or campus.is_deleted:
            raise ValidationError('请选择有效的校区')
        invoice_date = to_date(invoice_date, '开票日期')
        discount_percentage = to_float(discount_percentage, '折扣比例', minimum=0, default=0.0)
        if discount_percentage > 100:
            raise ValidationError('折扣比例不能超过 100')
        paid_amount = to_float(paid_amount, '已付金额', minimum=0, default=0.0)
        items = SalesService._normalize_items(items_data)

        subtotal, discount_amount, total = SalesService.compute_totals(items, discount_percentage)

        try:
            invoice = SalesInvoice(
                invoice_number=SalesService.generate_invoice_number(),
                campus_id=campus.id,
                invoice_date=invoice_date,
                subtotal=subtotal,
                discount_percentage=discount_percentage,
                discount_amount=discount_amount,
                total_amount=total,
                paid_amount=paid_amount,
                status=SalesService.resolve_status(paid_amount, total),
                notes=blank_to_none(notes)
            )
            db.session.add(invoice)
            db.session.flush()  # 获取 invoice.id

            for item in items:
                batch = InventoryService.decrement_batch(item['batch'].id, item['quantity'])
                unit_cost = batch.cost_price

                invoice.items.append(SalesItem(
                    product_id=batch.product_id,
                    batch_id=batch.id,
                    quantity=item['quantity'],
                    unit_price=item['unit_price'],
                    unit_cost=unit_cost,
                    total_price=round(item['quantity'] * item['unit_price'], 2),
                    profit=SalesService.line_profit(item['unit_price'], unit_cost, item['quantity'])
                ))

                db.session.add(InventoryLog(
                    product_id=batch.product_id,
                    batch_id=batch.id,
                    quantity=-item['quantity'],
                    type=InventoryLog.TYPE_OUT,
                    reference_type=InventoryLog.REF_SALES_INVOICE,
                    reference_id=invoice.id,
                    notes=f'销售出库 - {invoice.invoice_number}'
                ))

            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.exception('创建销售发票失败，已回滚')
            raise

        invalidate_product_batches(*[item['batch'].product_id for item in items])
        logger.info(f'销售发票 {invoice.invoice_number} 已创建，总额 {invoice.total_amount:.2f}，状态 {invoice.status}')
        return invoice

    @staticmethod
    def get_invoice(invoice_id):
        invoice = db.session.get(SalesInvoice, invoice_id) if invoice_id else None
        if invoice is None:
            raise NotFoundError(f'发票不存在: {invoice_id}')
        return invoice

    @staticmethod
    def list_invoices(status=None, campus_id=None):
        query = SalesInvoice.query
        if status:
            query = query.filter_by(status=status)
        if campus_id:
            query = query.filter_by(campus_id=campus_id)
        return query.order_by(SalesInvoice.created_at.desc()).all()

    @staticmethod
    def document_data(invoice, settings):
        """组装发票 PDF 所需数据"""
        return {
            'invoice_number': invoice.invoice_number,
            'invoice_date': invoice.invoice_date,
            'campus_name': invoice.campus.name if invoice.campus else '',
            'items': [{
                'product_title': item.product.title if item.product else '',
                'quantity': item.quantity,
                'unit_price': item.unit_price,
                'total_price': item.total_price,
            } for item in invoice.items],
            'subtotal': invoice.subtotal or 0.0,
            'discount_percentage': invoice.discount_percentage or 0,
            'discount_amount': invoice.discount_amount or 0.0,
            'total_amount': invoice.total_amount or 0.0,
            'company_name': settings.get('company_name'),
            'company_address': settings.get('company_address'),
            'company_phone': settings.get('company_phone'),
            'company_email': settings.get('company_email'),
            'currency': settings.get('currency'),
        }
