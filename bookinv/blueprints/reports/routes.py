from flask import render_template, request, Response, send_file, abort, jsonify
from flask_login import login_required

from . import reports_bp
from bookinv.services.export_service import export_service
from bookinv.services.report_service import ReportService
from bookinv.services.settings_service import SettingsService

# 导出类型 -> (报表构建函数, 行格式化函数, 文件名, 标题)
EXPORTS = {
    'inventory': (ReportService.inventory_report, export_service.inventory_report_rows,
                  'inventory_report', '库存估值报表'),
    'supplier': (ReportService.supplier_report, export_service.supplier_report_rows,
                 'supplier_report', '供应商采购报表'),
    'campus': (ReportService.campus_report, export_service.campus_report_rows,
               'campus_sales_report', '校区销售报表'),
}


@reports_bp.route('/')
@login_required
def index():
    """报表中心：库存估值、供应商、校区销售、利润汇总"""
    return render_template('reports/index.html',
                           inventory=ReportService.inventory_report(),
                           suppliers=ReportService.supplier_report(),
                           campuses=ReportService.campus_report(),
                           profit=ReportService.profit_loss_summary())


@reports_bp.route('/api/profit-loss')
@login_required
def profit_loss():
    return jsonify({'success': True, 'profit_loss': ReportService.profit_loss_summary()})


@reports_bp.route('/export/<kind>')
@login_required
def export(kind):
    """导出报表 (?format=csv|excel，默认 csv)"""
    if kind not in EXPORTS:
        abort(404)
    build, format_rows, filename, title = EXPORTS[kind]
    currency = SettingsService.get_settings().get('currency') or 'PKR'
    rows = format_rows(build(), currency)

    if request.args.get('format') == 'excel':
        output = export_service.to_excel(rows, sheet_name=filename, title=title)
        return send_file(
            output,
            mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
            as_attachment=True,
            download_name=f'{filename}.xlsx'
        )

    return Response(
        export_service.to_csv(rows),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}.csv'}
    )
