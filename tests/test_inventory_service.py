"""Batch status helpers and the atomic decrement."""

from datetime import date, timedelta

import pytest

from bookinv.exceptions import InsufficientStockError, NotFoundError, ValidationError
from bookinv.extensions import db
from bookinv.services import inventory_service
from bookinv.services.inventory_service import InventoryService


class TestStockStatus:

    @pytest.mark.parametrize("quantity,reorder,expected", [
        (0, 10, inventory_service.STOCK_OUT),
        (10, 10, inventory_service.STOCK_LOW),
        (3, 10, inventory_service.STOCK_LOW),
        (11, 10, inventory_service.STOCK_OK),
    ])
    def test_stock_status(self, quantity, reorder, expected):
        assert InventoryService.stock_status(quantity, reorder) == expected


class TestExpiryStatus:
    today = date(2024, 6, 1)

    def test_no_expiry(self):
        assert InventoryService.expiry_status(None, today=self.today, warning_days=30) is None

    def test_expired(self):
        assert InventoryService.expiry_status(
            self.today - timedelta(days=1), today=self.today, warning_days=30
        ) == inventory_service.EXPIRY_EXPIRED

    def test_expires_today_is_soon(self):
        assert InventoryService.expiry_status(
            self.today, today=self.today, warning_days=30
        ) == inventory_service.EXPIRY_SOON

    def test_within_window(self):
        assert InventoryService.expiry_status(
            self.today + timedelta(days=29), today=self.today, warning_days=30
        ) == inventory_service.EXPIRY_SOON

    def test_outside_window(self):
        assert InventoryService.expiry_status(
            self.today + timedelta(days=30), today=self.today, warning_days=30
        ) is None

    def test_window_from_config(self, app):
        app.config['EXPIRY_WARNING_DAYS'] = 5
        assert InventoryService.expiry_status(date.today() + timedelta(days=10)) is None
        assert InventoryService.expiry_status(date.today() + timedelta(days=3)) == inventory_service.EXPIRY_SOON


class TestDecrementBatch:

    def test_decrement(self, received_batch):
        batch = InventoryService.decrement_batch(received_batch.id, 3)
        db.session.commit()
        assert batch.quantity == 7

    def test_insufficient(self, received_batch):
        with pytest.raises(InsufficientStockError):
            InventoryService.decrement_batch(received_batch.id, 11)
        db.session.rollback()
        assert InventoryService.get_batch(received_batch.id).quantity == 10

    def test_unknown_batch(self, app):
        with pytest.raises(NotFoundError):
            InventoryService.decrement_batch('missing', 1)

    def test_non_positive_quantity(self, received_batch):
        with pytest.raises(ValidationError):
            InventoryService.decrement_batch(received_batch.id, 0)


class TestProductSummary:

    def test_summary_without_batches(self, product):
        assert InventoryService.product_summary(product.id) == {
            'total_quantity': 0, 'total_value': 0.0, 'batches_count': 0,
        }

    def test_summary_with_batch(self, received_batch):
        assert InventoryService.product_summary(received_batch.product_id) == {
            'total_quantity': 10, 'total_value': 50.0, 'batches_count': 1,
        }

    def test_list_batches(self, received_batch):
        batches = InventoryService.list_batches()
        assert [b.id for b in batches] == [received_batch.id]
        assert batches[0].product.title == 'Applied Physics Grade 9'
