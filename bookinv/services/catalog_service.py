"""基础资料服务 (图书/分类/供应商/校区 的增删改查)"""
import logging
from bookinv.extensions import db
from bookinv.exceptions import ValidationError, NotFoundError
from bookinv.models.catalog import Category, Product, Supplier, Campus
from bookinv.utils.parsing import blank_to_none, to_int

logger = logging.getLogger(__name__)


class CatalogService:
    # 必填字段 (仅做必填校验)
    REQUIRED_FIELDS = {
        Category: 'name',
        Product: 'title',
        Supplier: 'name',
        Campus: 'name',
    }

    EDITABLE_FIELDS = {
        Category: ('name', 'description'),
        Product: ('title', 'author', 'edition', 'isbn', 'sku', 'description',
                  'category_id', 'reorder_level'),
        Supplier: ('name', 'contact_person', 'phone', 'email', 'address',
                   'payment_terms', 'notes'),
        Campus: ('name', 'location', 'contact_person', 'phone', 'email'),
    }

    @staticmethod
    def _order_column(model):
        return model.title if model is Product else model.name

    @staticmethod
    def list_records(model, include_deleted=False):
        query = model.query
        if not include_deleted:
            query = query.filter(model.is_deleted == False)  # noqa: E712
        return query.order_by(CatalogService._order_column(model)).all()

    @staticmethod
    def get(model, record_id):
        record = db.session.get(model, record_id) if record_id else None
        if record is None or record.is_deleted:
            raise NotFoundError(f'{model.__name__} 不存在: {record_id}')
        return record

    @staticmethod
    def _clean(model, data, partial=False):
        """
        按模型过滤可编辑字段并做必填校验
        partial=True 用于更新：未提交的字段保持原值
        """
        cleaned = {}
        for field in CatalogService.EDITABLE_FIELDS[model]:
            if field in data:
                cleaned[field] = blank_to_none(data[field])

        required = CatalogService.REQUIRED_FIELDS[model]
        if (not partial or required in cleaned) and not cleaned.get(required):
            raise ValidationError(f'{required} 为必填项')

        if model is Product:
            if not partial or 'reorder_level' in cleaned:
                level = cleaned.get('reorder_level')
                cleaned['reorder_level'] = 10 if level is None else to_int(level, '补货阈值', minimum=0)
            if cleaned.get('category_id'):
                CatalogService.get(Category, cleaned['category_id'])
        return cleaned

    @staticmethod
    def _check_unique_sku(sku, exclude_id=None):
        if not sku:
            return
        query = Product.query.filter(Product.sku == sku)
        if exclude_id:
            query = query.filter(Product.id != exclude_id)
        if query.first():
            raise ValidationError(f'SKU 已存在: {sku}')

    @staticmethod
    def create(model, data):
        cleaned = CatalogService._clean(model, data)
        if model is Product:
            CatalogService._check_unique_sku(cleaned.get('sku'))

        record = model(**cleaned)
        db.session.add(record)
        db.session.commit()
        logger.info(f'新建 {model.__name__}: {record.id}')
        return record

    @staticmethod
    def update(model, record_id, data):
        record = CatalogService.get(model, record_id)
        cleaned = CatalogService._clean(model, data, partial=True)
        if model is Product:
            CatalogService._check_unique_sku(cleaned.get('sku'), exclude_id=record.id)

        for field, value in cleaned.items():
            setattr(record, field, value)
        db.session.commit()
        logger.info(f'更新 {model.__name__}: {record.id}')
        return record

    @staticmethod
    def delete(model, record_id):
        """软删除，保留历史单据引用"""
        record = CatalogService.get(model, record_id)
        record.delete(soft=True)
        logger.info(f'删除 {model.__name__}: {record.id}')
        return record
