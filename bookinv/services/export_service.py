"""
数据导出服务
支持 CSV、Excel 报表导出，以及发票 / 采购单 PDF 生成
"""
from io import BytesIO
from datetime import date, datetime
from typing import List, Dict, Any
from xml.sax.saxutils import escape

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from bookinv.exceptions import ValidationError


def _format_date(value):
    if isinstance(value, datetime):
        return value.strftime('%Y-%m-%d')
    if isinstance(value, date):
        return value.isoformat()
    return str(value or '')


def _money(currency, amount):
    return f"{currency} {float(amount or 0):.2f}"


class ExportService:
    """数据导出服务"""

    # ---------- CSV ----------

    @staticmethod
    def _csv_cell(value):
        """含逗号或双引号的值加引号并转义内部引号；None 输出空串"""
        if value is None:
            return ''
        if isinstance(value, str):
            if ',' in value or '"' in value:
                return '"' + value.replace('"', '""') + '"'
            return value
        return str(value)

    @staticmethod
    def to_csv(rows: List[Dict[str, Any]]) -> str:
        """
        序列化为 CSV 文本

        表头取第一条记录的键；其后记录缺失的键输出空串。
        """
        if not rows:
            raise ValidationError('没有可导出的数据')

        headers = list(rows[0].keys())
        lines = [','.join(ExportService._csv_cell(h) for h in headers)]
        for row in rows:
            lines.append(','.join(ExportService._csv_cell(row.get(h)) for h in headers))
        return '\n'.join(lines)

    @staticmethod
    def inventory_report_rows(report, currency='PKR'):
        return [{
            'Product': r['product_title'],
            'Total Quantity': r['total_quantity'],
            'Batches': r['batches_count'],
            f'Total Value ({currency})': f"{r['total_value']:.2f}",
        } for r in report]

    @staticmethod
    def supplier_report_rows(report, currency='PKR'):
        return [{
            'Supplier': r['supplier_name'],
            'Total Orders': r['total_orders'],
            'Pending Orders': r['pending_orders'],
            f'Total Spent ({currency})': f"{r['total_spent']:.2f}",
        } for r in report]

    @staticmethod
    def campus_report_rows(report, currency='PKR'):
        return [{
            'Campus': r['campus_name'],
            'Invoices': r['total_invoices'],
            f'Total Sales ({currency})': f"{r['total_sales']:.2f}",
            f'Total Profit ({currency})': f"{r['total_profit']:.2f}",
            f'Pending Amount ({currency})': f"{r['pending_amount']:.2f}",
        } for r in report]

    # ---------- Excel ----------

    @staticmethod
    def to_excel(
        rows: List[Dict[str, Any]],
        sheet_name: str = "Sheet1",
        title: str = "数据导出"
    ) -> BytesIO:
        """
        导出数据到 Excel

        Args:
            rows: 数据列表，表头取第一条记录的键
            sheet_name: 工作表名称
            title: 报表标题

        Returns:
            BytesIO: Excel 文件流
        """
        if not rows:
            raise ValidationError('没有可导出的数据')
        headers = list(rows[0].keys())

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = sheet_name

        # 样式定义
        title_font = Font(size=16, bold=True, color='FFFFFF')
        title_fill = PatternFill(start_color='3B82F6', end_color='3B82F6', fill_type='solid')
        header_font = Font(size=11, bold=True, color='FFFFFF')
        header_fill = PatternFill(start_color='22C55E', end_color='22C55E', fill_type='solid')
        border = Border(
            left=Side(style='thin', color='E5E7EB'),
            right=Side(style='thin', color='E5E7EB'),
            top=Side(style='thin', color='E5E7EB'),
            bottom=Side(style='thin', color='E5E7EB')
        )

        # 标题（合并单元格）
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(headers))
        title_cell = ws.cell(row=1, column=1, value=title)
        title_cell.font = title_font
        title_cell.fill = title_fill
        title_cell.alignment = Alignment(horizontal='center', vertical='center')
        ws.row_dimensions[1].height = 30

        # 表头
        for col_idx, header in enumerate(headers, start=1):
            cell = ws.cell(row=2, column=col_idx, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = border
            ws.column_dimensions[get_column_letter(col_idx)].width = max(15, len(header) + 4)

        # 数据
        for row_idx, row in enumerate(rows, start=3):
            for col_idx, header in enumerate(headers, start=1):
                value = row.get(header)
                if value is None:
                    value = ''
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = border
                if isinstance(value, (int, float)):
                    cell.alignment = Alignment(horizontal='right')

        # 冻结标题与表头
        ws.freeze_panes = 'A3'

        output = BytesIO()
        wb.save(output)
        output.seek(0)
        return output

    # ---------- PDF ----------

    @staticmethod
    def _build_pdf(header_lines, title, meta_lines, table_head, table_body, totals, footer, head_color):
        """
        通用单据 PDF：抬头、标题、单据信息、明细表、合计 (紧随表格之后)、页脚
        invariant=1 保证相同输入生成相同字节
        """
        output = BytesIO()
        doc = SimpleDocTemplate(
            output, pagesize=A4,
            leftMargin=14 * mm, rightMargin=14 * mm, topMargin=14 * mm, bottomMargin=20 * mm,
            title=title, invariant=1
        )
        styles = getSampleStyleSheet()
        company_style = ParagraphStyle('Company', parent=styles['Heading1'], fontSize=20, spaceAfter=4)
        title_style = ParagraphStyle('DocTitle', parent=styles['Heading2'], fontSize=16, spaceBefore=10, spaceAfter=8)
        normal = styles['Normal']

        elements = []
        company, *contact = header_lines
        elements.append(Paragraph(escape(company), company_style))
        for line in contact:
            if line:
                elements.append(Paragraph(escape(line), normal))

        elements.append(Paragraph(escape(title), title_style))
        for line in meta_lines:
            elements.append(Paragraph(escape(line), normal))
        elements.append(Spacer(1, 6 * mm))

        table = Table([table_head] + table_body, colWidths=[80 * mm, 25 * mm, 38 * mm, 38 * mm], repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), head_color),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 6 * mm))

        # 合计区：最后一行加粗
        totals_table = Table([[label, value] for label, value in totals], colWidths=[60 * mm, 40 * mm], hAlign='RIGHT')
        totals_table.setStyle(TableStyle([
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, -1), (-1, -1), 12),
        ]))
        elements.append(totals_table)

        def draw_footer(canvas, document):
            canvas.saveState()
            canvas.setFont('Helvetica', 8)
            canvas.drawString(14 * mm, 10 * mm, footer)
            canvas.restoreState()

        doc.build(elements, onFirstPage=draw_footer, onLaterPages=draw_footer)
        output.seek(0)
        return output

    @staticmethod
    def invoice_pdf(data: Dict[str, Any]) -> BytesIO:
        """销售发票 PDF，下载名 invoice_<number>.pdf"""
        currency = data.get('currency') or 'PKR'
        body = [[
            item['product_title'],
            str(item['quantity']),
            _money(currency, item['unit_price']),
            _money(currency, item['total_price']),
        ] for item in data.get('items', [])]

        discount_pct = data.get('discount_percentage') or 0
        return ExportService._build_pdf(
            header_lines=[
                data.get('company_name') or 'Book Inventory System',
                data.get('company_address') or '',
                data.get('company_phone') or '',
                data.get('company_email') or '',
            ],
            title='SALES INVOICE',
            meta_lines=[
                f"Invoice #: {data['invoice_number']}",
                f"Date: {_format_date(data.get('invoice_date'))}",
                f"Campus: {data.get('campus_name') or ''}",
            ],
            table_head=['Product', 'Quantity', 'Unit Price', 'Total'],
            table_body=body,
            totals=[
                ('Subtotal:', _money(currency, data.get('subtotal'))),
                (f'Discount ({discount_pct:g}%):', _money(currency, data.get('discount_amount'))),
                ('Total:', _money(currency, data.get('total_amount'))),
            ],
            footer='Thank you for your business!',
            head_color=colors.HexColor('#3B82F6'),
        )

    @staticmethod
    def purchase_order_pdf(data: Dict[str, Any]) -> BytesIO:
        """采购单 PDF，下载名 purchase_order_<number>.pdf"""
        currency = data.get('currency') or 'PKR'
        body = [[
            item['product_title'],
            str(item['quantity']),
            _money(currency, item['unit_cost']),
            _money(currency, item['total_cost']),
        ] for item in data.get('items', [])]

        return ExportService._build_pdf(
            header_lines=[
                data.get('company_name') or 'Book Inventory System',
                data.get('warehouse_address') or '',
            ],
            title='PURCHASE ORDER',
            meta_lines=[
                f"PO #: {data['po_number']}",
                f"Date: {_format_date(data.get('order_date'))}",
                f"Supplier: {data.get('supplier_name') or ''}",
            ],
            table_head=['Product', 'Quantity', 'Unit Cost', 'Total'],
            table_body=body,
            totals=[('Total Amount:', _money(currency, data.get('total_amount')))],
            footer='Please confirm receipt of this order.',
            head_color=colors.HexColor('#22C55E'),
        )


# 全局单例
export_service = ExportService()
