"""Report folds and grouped report queries."""

from datetime import date

from bookinv.models.catalog import Product, Supplier, Campus
from bookinv.services.catalog_service import CatalogService
from bookinv.services.purchase_service import PurchaseService
from bookinv.services.report_service import ReportService
from bookinv.services.sales_service import SalesService


def _sell(campus, batch, quantity, unit_price, paid_amount=0):
    return SalesService.create_invoice(
        campus_id=campus.id,
        invoice_date=date(2024, 3, 5),
        items_data=[{'batch_id': batch.id, 'quantity': quantity, 'unit_price': unit_price}],
        paid_amount=paid_amount
    )


class TestFolds:

    def test_fold_batches(self):
        batches = [
            {'quantity': 10, 'cost_price': 5.0},
            {'quantity': 2, 'cost_price': 7.5},
            {'quantity': 0, 'cost_price': 100.0},
        ]
        assert ReportService.fold_batches(batches) == {
            'total_quantity': 12, 'total_value': 65.0, 'batches_count': 3,
        }

    def test_fold_batches_order_independent(self):
        batches = [{'quantity': 3, 'cost_price': 1.1}, {'quantity': 7, 'cost_price': 2.2}]
        assert ReportService.fold_batches(batches) == ReportService.fold_batches(list(reversed(batches)))

    def test_fold_empty(self):
        assert ReportService.fold_batches([]) == {'total_quantity': 0, 'total_value': 0.0, 'batches_count': 0}
        assert ReportService.fold_invoices([]) == {
            'total_invoices': 0, 'total_sales': 0.0, 'total_paid': 0.0, 'pending_amount': 0.0,
        }

    def test_low_stock_boundary(self):
        assert ReportService.is_low_stock(10, 10) is True
        assert ReportService.is_low_stock(11, 10) is False
        assert ReportService.is_low_stock(0, 0) is True

    def test_fold_purchase_orders(self):
        orders = [
            {'total_amount': 50.0, 'status': 'pending'},
            {'total_amount': 20.0, 'status': 'received'},
        ]
        assert ReportService.fold_purchase_orders(orders) == {
            'total_orders': 2, 'total_spent': 70.0, 'pending_orders': 1,
        }

    def test_fold_invoices(self):
        invoices = [
            {'total_amount': 32.0, 'paid_amount': 32.0},
            {'total_amount': 18.0, 'paid_amount': None},
        ]
        assert ReportService.fold_invoices(invoices) == {
            'total_invoices': 2, 'total_sales': 50.0, 'total_paid': 32.0, 'pending_amount': 18.0,
        }

    def test_fold_profit(self):
        items = [{'total_price': 32.0, 'profit': 12.0}, {'total_price': 8.0, 'profit': -2.0}]
        assert ReportService.fold_profit(items) == {
            'revenue': 40.0, 'profit': 10.0, 'cost': 30.0, 'margin': 25.0,
        }

    def test_margin_without_revenue(self):
        assert ReportService.summarize_profit(0, 0)['margin'] == 0


class TestReports:

    def test_inventory_report_includes_products_without_batches(self, product):
        report = ReportService.inventory_report()
        assert report == [{
            'product_id': product.id,
            'product_title': product.title,
            'reorder_level': 10,
            'total_quantity': 0,
            'total_value': 0.0,
            'batches_count': 0,
            'low_stock': True,
        }]

    def test_inventory_report_after_sale(self, campus, received_batch):
        _sell(campus, received_batch, 4, 8.0)

        row = ReportService.inventory_report()[0]
        assert row['total_quantity'] == 6
        assert row['total_value'] == 30.0
        assert row['batches_count'] == 1
        assert row['low_stock'] is True

    def test_inventory_report_skips_deleted_products(self, product):
        CatalogService.delete(Product, product.id)
        assert ReportService.inventory_report() == []

    def test_supplier_report(self, product, supplier, received_batch):
        PurchaseService.create_purchase_order(
            supplier_id=supplier.id,
            order_date=date(2024, 3, 2),
            items_data=[{'product_id': product.id, 'quantity': 2, 'unit_price': 10.0}]
        )
        idle = CatalogService.create(Supplier, {'name': 'Zeta Books'})

        report = {r['supplier_id']: r for r in ReportService.supplier_report()}
        assert report[supplier.id]['total_orders'] == 2
        assert report[supplier.id]['pending_orders'] == 1
        assert report[supplier.id]['total_spent'] == 70.0
        assert report[idle.id] == {
            'supplier_id': idle.id, 'supplier_name': 'Zeta Books',
            'total_orders': 0, 'pending_orders': 0, 'total_spent': 0.0,
        }

    def test_campus_report(self, campus, received_batch):
        _sell(campus, received_batch, 4, 8.0, paid_amount=32.0)
        _sell(campus, received_batch, 2, 6.0)
        idle = CatalogService.create(Campus, {'name': 'Zeta Campus'})

        report = {r['campus_id']: r for r in ReportService.campus_report()}
        assert report[campus.id]['total_invoices'] == 2
        assert report[campus.id]['total_sales'] == 44.0
        assert report[campus.id]['total_profit'] == 14.0
        assert report[campus.id]['pending_amount'] == 12.0
        assert report[idle.id]['total_invoices'] == 0
        assert report[idle.id]['total_profit'] == 0.0

    def test_profit_loss_summary(self, campus, received_batch):
        _sell(campus, received_batch, 4, 8.0)
        assert ReportService.profit_loss_summary() == {
            'revenue': 32.0, 'profit': 12.0, 'cost': 20.0, 'margin': 37.5,
        }

    def test_dashboard_stats(self, product, supplier, campus, received_batch):
        PurchaseService.create_purchase_order(
            supplier_id=supplier.id,
            order_date=date(2024, 3, 2),
            items_data=[{'product_id': product.id, 'quantity': 2, 'unit_price': 10.0}]
        )
        _sell(campus, received_batch, 4, 8.0)

        assert ReportService.dashboard_stats() == {
            'total_products': 1,
            'total_inventory_value': 30.0,
            'low_stock_products': 1,
            'pending_orders': 1,
            'total_sales': 32.0,
        }

    def test_dashboard_stats_empty(self, app):
        assert ReportService.dashboard_stats() == {
            'total_products': 0,
            'total_inventory_value': 0.0,
            'low_stock_products': 0,
            'pending_orders': 0,
            'total_sales': 0.0,
        }
