"""
报表服务 - 库存估值 / 供应商 / 校区 / 利润汇总

纯函数 fold_* 对任意顺序的记录做单次累加 (可交换求和)；
报表构建函数用一次分组查询代替逐条记录的往返查询。
"""
from sqlalchemy import func, case
from bookinv.extensions import db
from bookinv.models.catalog import Product, Supplier, Campus
from bookinv.models.stock import Batch
from bookinv.models.purchase import PurchaseOrder
from bookinv.models.sales import SalesInvoice, SalesItem


def _get(record, field, default=0):
    """同时兼容 dict 与 ORM 对象"""
    if isinstance(record, dict):
        value = record.get(field, default)
    else:
        value = getattr(record, field, default)
    return default if value is None else value


class ReportService:
    """报表服务"""

    # ---------- 纯函数汇总 ----------

    @staticmethod
    def fold_batches(batches):
        """批次 -> {total_quantity, total_value, batches_count}"""
        total_quantity = 0
        total_value = 0.0
        count = 0
        for b in batches:
            qty = _get(b, 'quantity')
            total_quantity += qty
            total_value += qty * float(_get(b, 'cost_price'))
            count += 1
        return {
            'total_quantity': total_quantity,
            'total_value': round(total_value, 2),
            'batches_count': count,
        }

    @staticmethod
    def is_low_stock(total_quantity, reorder_level):
        """等于补货阈值也算低库存"""
        return total_quantity <= reorder_level

    @staticmethod
    def fold_purchase_orders(orders):
        """采购单 -> {total_orders, total_spent, pending_orders}"""
        total_orders = 0
        total_spent = 0.0
        pending = 0
        for o in orders:
            total_orders += 1
            total_spent += float(_get(o, 'total_amount'))
            if _get(o, 'status', None) == PurchaseOrder.STATUS_PENDING:
                pending += 1
        return {
            'total_orders': total_orders,
            'total_spent': round(total_spent, 2),
            'pending_orders': pending,
        }

    @staticmethod
    def fold_invoices(invoices):
        """发票 -> {total_invoices, total_sales, total_paid, pending_amount}"""
        count = 0
        total_sales = 0.0
        total_paid = 0.0
        for inv in invoices:
            count += 1
            total_sales += float(_get(inv, 'total_amount'))
            total_paid += float(_get(inv, 'paid_amount'))
        return {
            'total_invoices': count,
            'total_sales': round(total_sales, 2),
            'total_paid': round(total_paid, 2),
            'pending_amount': round(total_sales - total_paid, 2),
        }

    @staticmethod
    def summarize_profit(revenue, profit):
        revenue = float(revenue or 0)
        profit = float(profit or 0)
        return {
            'revenue': round(revenue, 2),
            'profit': round(profit, 2),
            'cost': round(revenue - profit, 2),
            'margin': round(profit / revenue * 100, 2) if revenue > 0 else 0,
        }

    @staticmethod
    def fold_profit(sales_items):
        """销售明细 -> {revenue, profit, cost, margin}"""
        revenue = 0.0
        profit = 0.0
        for item in sales_items:
            revenue += float(_get(item, 'total_price'))
            profit += float(_get(item, 'profit'))
        return ReportService.summarize_profit(revenue, profit)

    # ---------- 报表 (分组查询) ----------

    @staticmethod
    def inventory_report():
        """每本图书的在库数量、批次数、库存价值、低库存标记"""
        rows = db.session.query(
            Product.id,
            Product.title,
            Product.reorder_level,
            func.coalesce(func.sum(Batch.quantity), 0).label('total_quantity'),
            func.coalesce(func.sum(Batch.quantity * Batch.cost_price), 0.0).label('total_value'),
            func.count(Batch.id).label('batches_count')
        ).outerjoin(
            Batch, Batch.product_id == Product.id
        ).filter(
            Product.is_deleted == False  # noqa: E712
        ).group_by(
            Product.id, Product.title, Product.reorder_level
        ).order_by(Product.title).all()

        return [{
            'product_id': r.id,
            'product_title': r.title,
            'reorder_level': r.reorder_level,
            'total_quantity': int(r.total_quantity),
            'total_value': round(float(r.total_value), 2),
            'batches_count': r.batches_count,
            'low_stock': ReportService.is_low_stock(int(r.total_quantity), r.reorder_level),
        } for r in rows]

    @staticmethod
    def supplier_report():
        """每个供应商的采购单数、待收货单数、采购总额"""
        rows = db.session.query(
            Supplier.id,
            Supplier.name,
            func.count(PurchaseOrder.id).label('total_orders'),
            func.coalesce(func.sum(PurchaseOrder.total_amount), 0.0).label('total_spent'),
            func.coalesce(func.sum(
                case((PurchaseOrder.status == PurchaseOrder.STATUS_PENDING, 1), else_=0)
            ), 0).label('pending_orders')
        ).outerjoin(
            PurchaseOrder, PurchaseOrder.supplier_id == Supplier.id
        ).filter(
            Supplier.is_deleted == False  # noqa: E712
        ).group_by(Supplier.id, Supplier.name).order_by(Supplier.name).all()

        return [{
            'supplier_id': r.id,
            'supplier_name': r.name,
            'total_orders': r.total_orders,
            'pending_orders': int(r.pending_orders),
            'total_spent': round(float(r.total_spent), 2),
        } for r in rows]

    @staticmethod
    def campus_report():
        """每个校区的发票数、销售额、利润、待收金额"""
        invoice_rows = db.session.query(
            Campus.id,
            Campus.name,
            func.count(SalesInvoice.id).label('total_invoices'),
            func.coalesce(func.sum(SalesInvoice.total_amount), 0.0).label('total_sales'),
            func.coalesce(func.sum(SalesInvoice.paid_amount), 0.0).label('total_paid')
        ).outerjoin(
            SalesInvoice, SalesInvoice.campus_id == Campus.id
        ).filter(
            Campus.is_deleted == False  # noqa: E712
        ).group_by(Campus.id, Campus.name).order_by(Campus.name).all()

        profit_rows = db.session.query(
            SalesInvoice.campus_id,
            func.coalesce(func.sum(SalesItem.profit), 0.0).label('total_profit')
        ).join(
            SalesItem, SalesItem.sales_invoice_id == SalesInvoice.id
        ).group_by(SalesInvoice.campus_id).all()
        profit_by_campus = {r.campus_id: float(r.total_profit) for r in profit_rows}

        report = []
        for r in invoice_rows:
            total_sales = float(r.total_sales)
            report.append({
                'campus_id': r.id,
                'campus_name': r.name,
                'total_invoices': r.total_invoices,
                'total_sales': round(total_sales, 2),
                'total_profit': round(profit_by_campus.get(r.id, 0.0), 2),
                'pending_amount': round(total_sales - float(r.total_paid), 2),
            })
        return report

    @staticmethod
    def profit_loss_summary():
        """全局利润汇总"""
        row = db.session.query(
            func.coalesce(func.sum(SalesItem.total_price), 0.0).label('revenue'),
            func.coalesce(func.sum(SalesItem.profit), 0.0).label('profit')
        ).one()
        return ReportService.summarize_profit(row.revenue, row.profit)

    @staticmethod
    def dashboard_stats():
        """仪表盘五项统计"""
        inventory = ReportService.inventory_report()

        pending_orders = db.session.query(func.count(PurchaseOrder.id)).filter(
            PurchaseOrder.status == PurchaseOrder.STATUS_PENDING
        ).scalar() or 0

        total_sales = db.session.query(
            func.coalesce(func.sum(SalesInvoice.total_amount), 0.0)
        ).scalar() or 0.0

        return {
            'total_products': len(inventory),
            'total_inventory_value': round(sum(r['total_value'] for r in inventory), 2),
            'low_stock_products': sum(1 for r in inventory if r['low_stock']),
            'pending_orders': pending_orders,
            'total_sales': round(float(total_sales), 2),
        }
