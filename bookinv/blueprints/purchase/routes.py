"""采购管理路由"""
from datetime import date
from flask import render_template, request, flash, redirect, url_for, Response, send_file
from flask_login import login_required
from bookinv.blueprints.purchase import purchase_bp
from bookinv.blueprints.purchase.forms import PurchaseOrderForm, ReceiveForm
from bookinv.exceptions import BookInvException
from bookinv.models.catalog import Product, Supplier
from bookinv.models.purchase import PurchaseOrder
from bookinv.services.catalog_service import CatalogService
from bookinv.services.export_service import export_service
from bookinv.services.purchase_service import PurchaseService
from bookinv.services.settings_service import SettingsService

STATUS_LABELS = {
    PurchaseOrder.STATUS_PENDING: '待收货',
    PurchaseOrder.STATUS_RECEIVED: '已收货',
}


@purchase_bp.route('/')
@login_required
def index():
    """采购订单列表"""
    status = request.args.get('status', '')
    supplier_id = request.args.get('supplier_id', '')
    export_format = request.args.get('export', '')

    orders = PurchaseService.list_orders(status=status or None, supplier_id=supplier_id or None)

    # 导出功能
    if export_format in ('excel', 'csv'):
        try:
            return export_purchase_orders(orders, export_format)
        except BookInvException as e:
            flash(e.message, 'warning')
            return redirect(url_for('purchase.index', status=status, supplier_id=supplier_id))

    status_counts = {s: PurchaseOrder.query.filter_by(status=s).count() for s in STATUS_LABELS}

    return render_template('purchase/index.html',
                           orders=orders,
                           suppliers=CatalogService.list_records(Supplier),
                           current_status=status,
                           current_supplier=supplier_id,
                           status_counts=status_counts,
                           status_labels=STATUS_LABELS)


def export_purchase_orders(orders, format_type):
    """导出采购订单"""
    data = [{
        'PO Number': o.po_number,
        'Supplier': o.supplier.name if o.supplier else '',
        'Order Date': o.order_date.isoformat() if o.order_date else '',
        'Items': len(o.items),
        'Total Amount': f'{o.total_amount:.2f}',
        'Status': o.status,
        'Notes': o.notes or '',
    } for o in orders]

    if format_type == 'csv':
        return Response(
            export_service.to_csv(data),
            mimetype='text/csv',
            headers={'Content-Disposition': 'attachment; filename=purchase_orders.csv'}
        )

    output = export_service.to_excel(data, sheet_name='Purchase Orders', title='采购订单')
    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name='purchase_orders.xlsx'
    )


@purchase_bp.route('/create', methods=['GET', 'POST'])
@login_required
def create():
    """创建采购订单"""
    form = PurchaseOrderForm()
    form.supplier_id.choices = [(s.id, s.name) for s in CatalogService.list_records(Supplier)]
    if request.method == 'GET':
        form.order_date.data = date.today()
        if request.args.get('supplier_id'):
            form.supplier_id.data = request.args['supplier_id']

    products = CatalogService.list_records(Product)

    if form.validate_on_submit():
        # 明细行以平行数组提交
        product_ids = request.form.getlist('product_id[]')
        quantities = request.form.getlist('quantity[]')
        unit_prices = request.form.getlist('unit_price[]')

        items = [{
            'product_id': pid,
            'quantity': quantities[i] if i < len(quantities) else None,
            'unit_price': unit_prices[i] if i < len(unit_prices) else None,
        } for i, pid in enumerate(product_ids) if pid]

        try:
            po = PurchaseService.create_purchase_order(
                supplier_id=form.supplier_id.data,
                order_date=form.order_date.data,
                items_data=items,
                expected_delivery=form.expected_delivery.data,
                notes=form.notes.data
            )
            flash(f'采购订单 {po.po_number} 创建成功', 'success')
            return redirect(url_for('purchase.detail', po_id=po.id))
        except BookInvException as e:
            flash(e.message, 'danger')

    return render_template('purchase/create.html', form=form, products=products)


@purchase_bp.route('/<po_id>')
@login_required
def detail(po_id):
    """采购订单详情"""
    po = PurchaseService.get_order(po_id)
    return render_template('purchase/detail.html', po=po, status_labels=STATUS_LABELS)


@purchase_bp.route('/<po_id>/receive', methods=['GET', 'POST'])
@login_required
def receive(po_id):
    """收货入库"""
    po = PurchaseService.get_order(po_id)

    if po.is_received:
        flash(f'采购单 {po.po_number} 已收货，不能重复收货', 'warning')
        return redirect(url_for('purchase.detail', po_id=po.id))

    form = ReceiveForm()
    if form.validate_on_submit():
        try:
            PurchaseService.receive_order(po.id, form.batch_number.data, form.expiry_date.data)
            flash('收货成功，批次已入库', 'success')
            return redirect(url_for('purchase.detail', po_id=po.id))
        except BookInvException as e:
            flash(e.message, 'danger')

    return render_template('purchase/receive.html', po=po, form=form)


@purchase_bp.route('/<po_id>/pdf')
@login_required
def pdf(po_id):
    """下载采购单 PDF"""
    po = PurchaseService.get_order(po_id)
    data = PurchaseService.document_data(po, SettingsService.get_settings())
    return send_file(
        export_service.purchase_order_pdf(data),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f'purchase_order_{po.po_number}.pdf'
    )
