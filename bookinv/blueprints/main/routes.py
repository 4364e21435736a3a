from flask import render_template, jsonify
from flask_login import login_required
from sqlalchemy.orm import joinedload

from . import main_bp
from bookinv.models.stock import InventoryLog
from bookinv.services.report_service import ReportService


@main_bp.route('/')
@login_required
def index():
    # 1. 五项核心统计
    stats = ReportService.dashboard_stats()

    # 2. 最近 10 条库存流水
    recent_logs = InventoryLog.query.options(
        joinedload(InventoryLog.product),
        joinedload(InventoryLog.batch)
    ).order_by(InventoryLog.created_at.desc()).limit(10).all()

    return render_template('main/dashboard.html',
                           stats=stats,
                           logs=recent_logs)


@main_bp.route('/api/dashboard/stats')
@login_required
def dashboard_stats():
    """仪表盘统计 (JSON)"""
    return jsonify({
        'success': True,
        'stats': ReportService.dashboard_stats()
    })
