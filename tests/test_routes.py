"""HTTP smoke tests for the blueprints."""

from datetime import date

import pytest

from bookinv.extensions import db
from bookinv.models.auth import User
from bookinv.models.purchase import PurchaseOrder
from bookinv.models.sales import SalesInvoice
from bookinv.models.stock import Batch
from bookinv.services.purchase_service import PurchaseService
from bookinv.services.settings_service import SettingsService


class TestPages:

    @pytest.mark.parametrize("url", [
        '/',
        '/catalog/products/',
        '/catalog/categories/',
        '/catalog/suppliers/',
        '/catalog/campuses/',
        '/catalog/products/new',
        '/inventory/',
        '/inventory/logs',
        '/purchase/',
        '/purchase/create',
        '/sales/',
        '/sales/create',
        '/reports/',
        '/settings/',
        '/auth/login',
    ])
    def test_pages_render(self, client, url):
        assert client.get(url).status_code == 200

    def test_pages_with_data(self, client, supplier, campus, received_batch):
        product_id = received_batch.product_id
        for url in (
            '/',
            f'/catalog/products/{product_id}/view',
            f'/catalog/suppliers/{supplier.id}/view',
            f'/catalog/campuses/{campus.id}/view',
            f'/catalog/products/{product_id}/edit',
            '/inventory/',
            f'/purchase/{received_batch.purchase_order_id}',
            '/reports/',
        ):
            assert client.get(url).status_code == 200, url

    def test_unknown_entity(self, client):
        assert client.get('/catalog/widgets/').status_code == 404

    def test_unknown_order(self, client):
        assert client.get('/purchase/missing').status_code == 404


class TestCatalogRoutes:

    def test_create_product(self, client, category):
        resp = client.post('/catalog/products/new', data={
            'title': 'Essential Chemistry', 'sku': 'BK-00009', 'category_id': category.id,
            'reorder_level': '4',
        })
        assert resp.status_code == 302

        resp = client.get('/catalog/products/')
        assert 'Essential Chemistry' in resp.get_data(as_text=True)

    def test_invalid_isbn_rerenders_form(self, client):
        resp = client.post('/catalog/products/new', data={'title': 'X', 'isbn': '12345'})
        assert resp.status_code == 200

    def test_delete(self, client, supplier):
        resp = client.post(f'/catalog/suppliers/{supplier.id}/delete')
        assert resp.status_code == 302
        assert client.get(f'/catalog/suppliers/{supplier.id}/view').status_code == 404


class TestPurchaseRoutes:

    def test_create_receive_and_pdf(self, client, product, supplier):
        resp = client.post('/purchase/create', data={
            'supplier_id': supplier.id,
            'order_date': '2024-03-01',
            'product_id[]': [product.id],
            'quantity[]': ['10'],
            'unit_price[]': ['5.00'],
        })
        assert resp.status_code == 302
        po = PurchaseOrder.query.one()
        assert po.total_amount == 50.0

        resp = client.post(f'/purchase/{po.id}/receive', data={'batch_number': 'B1'})
        assert resp.status_code == 302
        assert Batch.query.one().quantity == 10

        # 已收货订单再次进入收货页会被重定向
        assert client.get(f'/purchase/{po.id}/receive').status_code == 302

        resp = client.get(f'/purchase/{po.id}/pdf')
        assert resp.status_code == 200
        assert resp.mimetype == 'application/pdf'
        assert f'purchase_order_{po.po_number}.pdf' in resp.headers['Content-Disposition']
        assert resp.data.startswith(b'%PDF')

    def test_create_without_lines_flashes(self, client, supplier):
        resp = client.post('/purchase/create', data={'supplier_id': supplier.id, 'order_date': '2024-03-01'})
        assert resp.status_code == 200
        assert PurchaseOrder.query.count() == 0

    def test_export_csv(self, client, received_batch):
        resp = client.get('/purchase/?export=csv')
        assert resp.status_code == 200
        assert resp.mimetype == 'text/csv'
        assert resp.get_data(as_text=True).startswith('PO Number,Supplier')


class TestSalesRoutes:

    def test_create_invoice_and_pdf(self, client, campus, received_batch):
        resp = client.post('/sales/create', data={
            'campus_id': campus.id,
            'invoice_date': '2024-03-05',
            'discount_percentage': '0',
            'paid_amount': '32',
            'product_id[]': [received_batch.product_id],
            'batch_id[]': [received_batch.id],
            'quantity[]': ['4'],
            'unit_price[]': ['8.00'],
        })
        assert resp.status_code == 302
        invoice = SalesInvoice.query.one()
        assert invoice.status == SalesInvoice.STATUS_PAID
        assert db.session.get(Batch, received_batch.id).quantity == 6

        assert client.get(f'/sales/{invoice.id}').status_code == 200
        resp = client.get(f'/sales/{invoice.id}/pdf')
        assert resp.status_code == 200
        assert f'invoice_{invoice.invoice_number}.pdf' in resp.headers['Content-Disposition']
        assert resp.data.startswith(b'%PDF')

    def test_oversell_flashes_and_keeps_stock(self, client, campus, received_batch):
        resp = client.post('/sales/create', data={
            'campus_id': campus.id,
            'invoice_date': '2024-03-05',
            'product_id[]': [received_batch.product_id],
            'batch_id[]': [received_batch.id],
            'quantity[]': ['11'],
            'unit_price[]': ['8.00'],
        })
        assert resp.status_code == 200
        assert SalesInvoice.query.count() == 0
        assert db.session.get(Batch, received_batch.id).quantity == 10

    def test_batches_api(self, client, received_batch):
        resp = client.get(f'/sales/api/batches/{received_batch.product_id}')
        assert resp.status_code == 200
        payload = resp.get_json()
        assert [b['id'] for b in payload['batches']] == [received_batch.id]
        assert payload['summary'] == {'total_quantity': 10, 'total_value': 50.0, 'batches_count': 1}

    def test_batches_api_unknown_product(self, client):
        resp = client.get('/sales/api/batches/missing')
        assert resp.status_code == 404
        assert resp.get_json()['success'] is False


class TestReportsAndDashboard:

    def test_dashboard_api(self, client, received_batch):
        stats = client.get('/api/dashboard/stats').get_json()['stats']
        assert stats['total_products'] == 1
        assert stats['total_inventory_value'] == 50.0

    @pytest.mark.parametrize("kind,filename", [
        ('inventory', 'inventory_report.csv'),
        ('supplier', 'supplier_report.csv'),
        ('campus', 'campus_sales_report.csv'),
    ])
    def test_csv_exports(self, client, campus, received_batch, kind, filename):
        resp = client.get(f'/reports/export/{kind}')
        assert resp.status_code == 200
        assert resp.mimetype == 'text/csv'
        assert filename in resp.headers['Content-Disposition']

    def test_excel_export(self, client, received_batch):
        resp = client.get('/reports/export/inventory?format=excel')
        assert resp.status_code == 200
        assert 'inventory_report.xlsx' in resp.headers['Content-Disposition']

    def test_unknown_export(self, client):
        assert client.get('/reports/export/nothing').status_code == 404


class TestSettingsAndAuth:

    def test_update_settings(self, client):
        resp = client.post('/settings/', data={'company_name': 'Acme Books', 'currency': 'USD', 'tax_rate': '5'})
        assert resp.status_code == 302
        settings = SettingsService.get_settings()
        assert settings['company_name'] == 'Acme Books'
        assert settings['currency'] == 'USD'
        assert settings['tax_rate'] == 5.0

    def test_defaults_from_config(self, app):
        settings = SettingsService.get_settings()
        assert settings['company_name'] == 'Book Inventory System'
        assert settings['currency'] == 'PKR'

    def test_login(self, client):
        user = User(email='admin@example.com', username='admin', role=User.ROLE_ADMIN)
        user.password = 'secret'
        db.session.add(user)
        db.session.commit()

        resp = client.post('/auth/login', data={'email': 'admin@example.com', 'password': 'wrong'})
        assert resp.status_code == 302
        assert resp.headers['Location'].endswith('/auth/login')

        resp = client.post('/auth/login', data={'email': 'admin@example.com', 'password': 'secret'})
        assert resp.status_code == 302
        assert db.session.get(User, user.id).last_login is not None


class TestAccessControl:

    @pytest.fixture
    def secured_client(self, app):
        app.config['LOGIN_DISABLED'] = False
        return app.test_client()

    def _login(self, client, role):
        user = User(email=f'{role}@example.com', username=role, role=role)
        user.password = 'secret'
        db.session.add(user)
        db.session.commit()
        client.post('/auth/login', data={'email': user.email, 'password': 'secret'})

    def test_anonymous_redirected_to_login(self, secured_client):
        resp = secured_client.get('/inventory/')
        assert resp.status_code == 302
        assert '/auth/login' in resp.headers['Location']

    def test_non_admin_cannot_delete(self, secured_client, supplier):
        self._login(secured_client, User.ROLE_USER)
        assert secured_client.get('/inventory/').status_code == 200
        assert secured_client.post(f'/catalog/suppliers/{supplier.id}/delete').status_code == 403
        assert secured_client.get('/settings/').status_code == 403

    def test_admin_can_open_settings(self, secured_client):
        self._login(secured_client, User.ROLE_ADMIN)
        assert secured_client.get('/settings/').status_code == 200
