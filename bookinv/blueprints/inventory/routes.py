"""库存批次路由"""
from flask import render_template, request, current_app
from flask_login import login_required
from sqlalchemy.orm import joinedload
from bookinv.blueprints.inventory import inventory_bp
from bookinv.models.stock import InventoryLog
from bookinv.services.inventory_service import InventoryService


@inventory_bp.route('/')
@login_required
def index():
    """
    批次列表
    每个批次标注库存状态 (缺货 / 低库存 / 正常) 与有效期状态 (已过期 / 临期)
    """
    warning_days = current_app.config.get('EXPIRY_WARNING_DAYS', 30)
    rows = []
    for batch in InventoryService.list_batches():
        reorder_level = batch.product.reorder_level if batch.product else 0
        rows.append({
            'batch': batch,
            'stock_status': InventoryService.stock_status(batch.quantity, reorder_level),
            'expiry_status': InventoryService.expiry_status(batch.expiry_date, warning_days=warning_days),
        })

    status = request.args.get('status', '')
    if status:
        rows = [r for r in rows if status in (r['stock_status'], r['expiry_status'])]

    return render_template('inventory/index.html', rows=rows, current_status=status)


@inventory_bp.route('/logs')
@login_required
def logs():
    """库存流水"""
    page = request.args.get('page', 1, type=int)
    log_type = request.args.get('type', '')

    query = InventoryLog.query.options(
        joinedload(InventoryLog.product),
        joinedload(InventoryLog.batch)
    )
    if log_type:
        query = query.filter_by(type=log_type)

    pagination = query.order_by(InventoryLog.created_at.desc()).paginate(
        page=page, per_page=current_app.config.get('ITEMS_PER_PAGE', 15), error_out=False
    )
    return render_template('inventory/logs.html',
                           logs=pagination.items,
                           pagination=pagination,
                           current_type=log_type)
