"""
表单验证器
"""
from wtforms.validators import ValidationError
import re

def validate_isbn(form, field):
    """验证 ISBN-10 / ISBN-13 格式 (允许连字符和空格)"""
    if field.data:
        digits = re.sub(r'[\s-]', '', field.data)
        if not re.match(r'^(\d{9}[\dXx]|\d{13})$', digits):
            raise ValidationError('请输入有效的 ISBN (10 位或 13 位)')

def validate_sku(form, field):
    """验证SKU格式"""
    if field.data:
        # SKU应为字母数字组合
        if not re.match(r'^[A-Za-z0-9-]+$', field.data):
            raise ValidationError('SKU只能包含字母、数字和连字符')