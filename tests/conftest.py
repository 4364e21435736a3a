"""Pytest configuration and fixtures."""

from datetime import date

import pytest

from bookinv import create_app
from bookinv.extensions import db
from bookinv.models.catalog import Category, Product, Supplier, Campus
from bookinv.services.catalog_service import CatalogService
from bookinv.services.purchase_service import PurchaseService


@pytest.fixture(scope="function")
def app():
    """Create an app bound to an in-memory SQLite database."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


@pytest.fixture
def category(app):
    return CatalogService.create(Category, {'name': 'Textbooks'})


@pytest.fixture
def product(app, category):
    """A product with the default reorder level of 10."""
    return CatalogService.create(Product, {
        'title': 'Applied Physics Grade 9',
        'author': 'A. Khan',
        'sku': 'BK-00001',
        'category_id': category.id,
    })


@pytest.fixture
def supplier(app):
    return CatalogService.create(Supplier, {'name': 'Punjab Book Depot', 'payment_terms': 'Net 30'})


@pytest.fixture
def campus(app):
    return CatalogService.create(Campus, {'name': 'Lahore Junior Branch', 'location': 'Lahore'})


@pytest.fixture
def received_batch(product, supplier):
    """Purchase 10 units at 5.00 and receive them as batch B1."""
    po = PurchaseService.create_purchase_order(
        supplier_id=supplier.id,
        order_date=date(2024, 3, 1),
        items_data=[{'product_id': product.id, 'quantity': 10, 'unit_price': 5.0}]
    )
    PurchaseService.receive_order(po.id, 'B1')
    return po.batches[0]
