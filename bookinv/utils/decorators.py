from functools import wraps
from flask import current_app
from flask_login import current_user
from bookinv.exceptions import PermissionDenied


def admin_required(f):
    """
    检查用户是否是管理员
    (测试配置 LOGIN_DISABLED 时跳过)
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_app.config.get('LOGIN_DISABLED'):
            return f(*args, **kwargs)
        if not current_user.is_authenticated or not current_user.is_admin:
            raise PermissionDenied('需要管理员权限')
        return f(*args, **kwargs)
    return decorated_function
