"""基础资料路由 (图书 / 分类 / 供应商 / 校区)"""
from flask import render_template, request, flash, redirect, url_for, abort
from flask_login import login_required
from bookinv.blueprints.catalog import catalog_bp
from bookinv.blueprints.catalog.forms import CategoryForm, ProductForm, SupplierForm, CampusForm
from bookinv.exceptions import BookInvException
from bookinv.models.catalog import Category, Product, Supplier, Campus
from bookinv.models.stock import Batch
from bookinv.services.catalog_service import CatalogService
from bookinv.services.inventory_service import InventoryService
from bookinv.services.purchase_service import PurchaseService
from bookinv.services.report_service import ReportService
from bookinv.services.sales_service import SalesService
from bookinv.utils.decorators import admin_required

# 实体注册表：URL 段 -> (模型, 表单, 标题, 列表列)
ENTITIES = {
    'products': {
        'model': Product, 'form': ProductForm, 'label': '图书',
        'columns': [('title', '书名'), ('author', '作者'), ('isbn', 'ISBN'),
                    ('sku', 'SKU'), ('reorder_level', '补货阈值')],
    },
    'categories': {
        'model': Category, 'form': CategoryForm, 'label': '分类',
        'columns': [('name', '名称'), ('description', '描述')],
    },
    'suppliers': {
        'model': Supplier, 'form': SupplierForm, 'label': '供应商',
        'columns': [('name', '名称'), ('contact_person', '联系人'), ('phone', '电话'),
                    ('email', '邮箱'), ('payment_terms', '付款条件')],
    },
    'campuses': {
        'model': Campus, 'form': CampusForm, 'label': '校区',
        'columns': [('name', '名称'), ('location', '位置'), ('contact_person', '联系人'),
                    ('phone', '电话'), ('email', '邮箱')],
    },
}


def _entity_or_404(entity):
    meta = ENTITIES.get(entity)
    if meta is None:
        abort(404)
    return meta


def _build_form(meta, obj=None):
    form = meta['form'](obj=obj)
    if meta['model'] is Product:
        categories = CatalogService.list_records(Category)
        form.category_id.choices = [('', '(未分类)')] + [(c.id, c.name) for c in categories]
        if obj is not None and request.method == 'GET':
            form.category_id.data = obj.category_id or ''
    return form


def _form_payload(form):
    return {name: field.data for name, field in form._fields.items()
            if name not in ('submit', 'csrf_token')}


@catalog_bp.route('/<entity>/')
@login_required
def index(entity):
    """列表页"""
    meta = _entity_or_404(entity)
    records = CatalogService.list_records(meta['model'])

    stock = {}
    if meta['model'] is Product:
        stock = {r['product_id']: r for r in ReportService.inventory_report()}

    return render_template('catalog/index.html',
                           entity=entity,
                           meta=meta,
                           records=records,
                           stock=stock)


@catalog_bp.route('/<entity>/new', methods=['GET', 'POST'])
@login_required
def create(entity):
    """新建"""
    meta = _entity_or_404(entity)
    form = _build_form(meta)

    if form.validate_on_submit():
        try:
            CatalogService.create(meta['model'], _form_payload(form))
            flash(f"{meta['label']}创建成功", 'success')
            return redirect(url_for('catalog.index', entity=entity))
        except BookInvException as e:
            flash(e.message, 'danger')

    return render_template('catalog/form.html', entity=entity, meta=meta, form=form, record=None)


@catalog_bp.route('/<entity>/<record_id>/edit', methods=['GET', 'POST'])
@login_required
def edit(entity, record_id):
    """编辑"""
    meta = _entity_or_404(entity)
    record = CatalogService.get(meta['model'], record_id)
    form = _build_form(meta, obj=record)

    if form.validate_on_submit():
        try:
            CatalogService.update(meta['model'], record_id, _form_payload(form))
            flash(f"{meta['label']}已更新", 'success')
            return redirect(url_for('catalog.index', entity=entity))
        except BookInvException as e:
            flash(e.message, 'danger')

    return render_template('catalog/form.html', entity=entity, meta=meta, form=form, record=record)


@catalog_bp.route('/<entity>/<record_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete(entity, record_id):
    """删除 (软删除)"""
    meta = _entity_or_404(entity)
    try:
        CatalogService.delete(meta['model'], record_id)
        flash(f"{meta['label']}已删除", 'success')
    except BookInvException as e:
        flash(e.message, 'danger')
    return redirect(url_for('catalog.index', entity=entity))


@catalog_bp.route('/products/<record_id>/view')
@login_required
def product_detail(record_id):
    """图书详情：批次与库存汇总"""
    product = CatalogService.get(Product, record_id)
    summary = InventoryService.product_summary(product.id)
    return render_template('catalog/product_detail.html',
                           product=product,
                           batches=product.batches.order_by(Batch.received_date, Batch.created_at).all(),
                           summary=summary,
                           low_stock=ReportService.is_low_stock(summary['total_quantity'], product.reorder_level))


@catalog_bp.route('/suppliers/<record_id>/view')
@login_required
def supplier_detail(record_id):
    """供应商详情：采购单汇总"""
    supplier = CatalogService.get(Supplier, record_id)
    orders = PurchaseService.list_orders(supplier_id=supplier.id)
    return render_template('catalog/supplier_detail.html',
                           supplier=supplier,
                           orders=orders,
                           summary=ReportService.fold_purchase_orders(orders))


@catalog_bp.route('/campuses/<record_id>/view')
@login_required
def campus_detail(record_id):
    """校区详情：发票与利润汇总"""
    campus = CatalogService.get(Campus, record_id)
    invoices = SalesService.list_invoices(campus_id=campus.id)
    items = [item for inv in invoices for item in inv.items]
    return render_template('catalog/campus_detail.html',
                           campus=campus,
                           invoices=invoices,
                           summary=ReportService.fold_invoices(invoices),
                           profit=ReportService.fold_profit(items))
