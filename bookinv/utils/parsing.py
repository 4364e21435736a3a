"""
表单/接口输入转换工具
转换失败统一抛出 ValidationError，保证在任何写操作之前拦截
"""
import math
from datetime import date, datetime
from bookinv.exceptions import ValidationError


def to_int(value, field_name, minimum=None):
    """转换为整数，可选最小值校验"""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f'{field_name} 不能为空')
    try:
        number = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f'{field_name} 必须是整数')
    if minimum is not None and number < minimum:
        raise ValidationError(f'{field_name} 不能小于 {minimum}')
    return number


def to_float(value, field_name, minimum=None, default=None):
    """转换为浮点数；空值时返回 default (若提供)"""
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is not None:
            return default
        raise ValidationError(f'{field_name} 不能为空')
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field_name} 必须是数字')
    # nan 与任何数比较都为 False
    if not math.isfinite(number):
        raise ValidationError(f'{field_name} 必须是有效数字')
    if minimum is not None and number < minimum:
        raise ValidationError(f'{field_name} 不能小于 {minimum}')
    return number


def to_date(value, field_name, required=True):
    """接受 date/datetime 或 ISO 格式字符串 (YYYY-MM-DD)"""
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f'{field_name} 不能为空')
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f'{field_name} 日期格式应为 YYYY-MM-DD')


def blank_to_none(value):
    """去除首尾空白，空串视为 None"""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value
