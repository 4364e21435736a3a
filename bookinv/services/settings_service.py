"""系统设置服务"""
import logging
from flask import current_app
from bookinv.extensions import db
from bookinv.models.settings import SystemSetting
from bookinv.utils.parsing import blank_to_none, to_float

logger = logging.getLogger(__name__)


class SettingsService:
    FIELDS = (
        'company_name', 'company_address', 'company_phone', 'company_email',
        'warehouse_name', 'warehouse_address', 'tax_rate', 'currency',
    )

    @staticmethod
    def _defaults():
        return {
            'company_name': current_app.config.get('COMPANY_NAME', 'Book Inventory System'),
            'company_address': '',
            'company_phone': '',
            'company_email': '',
            'warehouse_name': '',
            'warehouse_address': '',
            'tax_rate': 0.0,
            'currency': current_app.config.get('CURRENCY', 'PKR'),
        }

    @staticmethod
    def get_settings():
        """返回设置字典：数据库中的非空值覆盖配置默认值"""
        data = SettingsService._defaults()
        row = SystemSetting.query.first()
        if row:
            for field in SettingsService.FIELDS:
                value = getattr(row, field)
                if value not in (None, ''):
                    data[field] = value
        return data

    @staticmethod
    def update_settings(form_data):
        row = SystemSetting.query.first()
        if not row:
            row = SystemSetting()
            db.session.add(row)

        for field in SettingsService.FIELDS:
            if field not in form_data:
                continue
            if field == 'tax_rate':
                row.tax_rate = to_float(form_data[field], '税率', minimum=0, default=0.0)
            else:
                setattr(row, field, blank_to_none(form_data[field]))

        db.session.commit()
        logger.info('系统设置已更新')
        return row
