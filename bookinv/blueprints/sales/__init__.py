from flask import Blueprint

# 注意：url_prefix 在 bookinv/__init__.py 注册时设置，这里不重复设置
sales_bp = Blueprint('sales', __name__)

from . import routes
