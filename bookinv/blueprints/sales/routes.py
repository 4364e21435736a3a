"""销售管理路由"""
from datetime import date
from flask import render_template, request, flash, redirect, url_for, jsonify, send_file
from flask_login import login_required
from bookinv.blueprints.sales import sales_bp
from bookinv.blueprints.sales.forms import SalesInvoiceForm
from bookinv.exceptions import BookInvException
from bookinv.models.catalog import Campus, Product
from bookinv.models.sales import SalesInvoice
from bookinv.services.catalog_service import CatalogService
from bookinv.services.export_service import export_service
from bookinv.services.inventory_service import InventoryService
from bookinv.services.sales_service import SalesService
from bookinv.services.settings_service import SettingsService

STATUS_LABELS = {
    SalesInvoice.STATUS_PENDING: '待付款',
    SalesInvoice.STATUS_PARTIAL: '部分付款',
    SalesInvoice.STATUS_PAID: '已付款',
}


@sales_bp.route('/')
@login_required
def index():
    """销售发票列表"""
    status = request.args.get('status', '')
    campus_id = request.args.get('campus_id', '')
    invoices = SalesService.list_invoices(status=status or None, campus_id=campus_id or None)

    return render_template('sales/index.html',
                           invoices=invoices,
                           campuses=CatalogService.list_records(Campus),
                           current_status=status,
                           current_campus=campus_id,
                           status_labels=STATUS_LABELS)


@sales_bp.route('/create', methods=['GET', 'POST'])
@login_required
def create():
    """开具销售发票"""
    form = SalesInvoiceForm()
    form.campus_id.choices = [(c.id, c.name) for c in CatalogService.list_records(Campus)]
    if request.method == 'GET':
        form.invoice_date.data = date.today()
        if request.args.get('campus_id'):
            form.campus_id.data = request.args['campus_id']

    products = CatalogService.list_records(Product)

    if form.validate_on_submit():
        product_ids = request.form.getlist('product_id[]')
        batch_ids = request.form.getlist('batch_id[]')
        quantities = request.form.getlist('quantity[]')
        unit_prices = request.form.getlist('unit_price[]')

        def _at(values, i):
            return values[i] if i < len(values) else None

        items = [{
            'product_id': pid,
            'batch_id': _at(batch_ids, i),
            'quantity': _at(quantities, i),
            'unit_price': _at(unit_prices, i),
        } for i, pid in enumerate(product_ids) if pid]

        try:
            invoice = SalesService.create_invoice(
                campus_id=form.campus_id.data,
                invoice_date=form.invoice_date.data,
                items_data=items,
                discount_percentage=form.discount_percentage.data,
                paid_amount=form.paid_amount.data,
                notes=form.notes.data
            )
            flash(f'发票 {invoice.invoice_number} 开具成功', 'success')
            return redirect(url_for('sales.detail', invoice_id=invoice.id))
        except BookInvException as e:
            flash(e.message, 'danger')

    return render_template('sales/create.html', form=form, products=products)


@sales_bp.route('/<invoice_id>')
@login_required
def detail(invoice_id):
    """发票详情"""
    invoice = SalesService.get_invoice(invoice_id)
    return render_template('sales/detail.html', invoice=invoice, status_labels=STATUS_LABELS)


@sales_bp.route('/<invoice_id>/pdf')
@login_required
def pdf(invoice_id):
    """下载发票 PDF"""
    invoice = SalesService.get_invoice(invoice_id)
    data = SalesService.document_data(invoice, SettingsService.get_settings())
    return send_file(
        export_service.invoice_pdf(data),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f'invoice_{invoice.invoice_number}.pdf'
    )


@sales_bp.route('/api/batches/<product_id>')
@login_required
def product_batches(product_id):
    """开票页选择批次：返回可售批次与库存汇总"""
    product = CatalogService.get(Product, product_id)
    return jsonify({
        'success': True,
        'product_id': product.id,
        'batches': InventoryService.available_batches(product.id),
        'summary': InventoryService.product_summary(product.id),
    })
