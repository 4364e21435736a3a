import logging
import colorlog
from flask import Flask, render_template, request, jsonify
from config import config
from bookinv.extensions import db, migrate, login_manager, cache, csrf
from bookinv.exceptions import BookInvException

# 导入 commands 模块，用于注册 CLI 命令
from bookinv import commands


def create_app(config_name='default'):
    """图书进销存应用工厂函数"""
    app = Flask(__name__)

    # 1. 加载配置
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # 2. 初始化扩展
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    cache.init_app(app)
    csrf.init_app(app)

    # 3. 配置日志
    configure_logging(app)

    # 4. 注册蓝图 (Blueprints)
    register_blueprints(app)

    # 5. 注册全局错误处理
    register_error_handlers(app)

    # 6. 注册 CLI 命令
    register_commands(app)

    # 7. 模板全局变量
    register_template_context(app)

    return app


def register_blueprints(app):
    """注册所有业务模块蓝图"""
    # 仪表盘
    from bookinv.blueprints.main import main_bp
    app.register_blueprint(main_bp)

    # 认证
    from bookinv.blueprints.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')

    # 基础资料 (图书/分类/供应商/校区)
    from bookinv.blueprints.catalog import catalog_bp
    app.register_blueprint(catalog_bp, url_prefix='/catalog')

    # 库存批次
    from bookinv.blueprints.inventory import inventory_bp
    app.register_blueprint(inventory_bp, url_prefix='/inventory')

    # 采购管理
    from bookinv.blueprints.purchase import purchase_bp
    app.register_blueprint(purchase_bp, url_prefix='/purchase')

    # 销售管理
    from bookinv.blueprints.sales import sales_bp
    app.register_blueprint(sales_bp, url_prefix='/sales')

    # 报表分析
    from bookinv.blueprints.reports import reports_bp
    app.register_blueprint(reports_bp, url_prefix='/reports')

    # 系统设置
    from bookinv.blueprints.settings import settings_bp
    app.register_blueprint(settings_bp, url_prefix='/settings')


def register_error_handlers(app):
    @app.errorhandler(BookInvException)
    def handle_business_error(e):
        app.logger.warning(f'业务异常 [{e.code}]: {e.message}')
        if request.is_json or '/api/' in request.path:
            return jsonify(e.to_dict()), e.code
        return render_template('errors/error.html', error=e), e.code

    @app.errorhandler(404)
    def page_not_found(e):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_server_error(e):
        return render_template('errors/500.html'), 500


def register_commands(app):
    """注册 Flask CLI 命令"""
    app.cli.add_command(commands.forge)
    app.cli.add_command(commands.status)
    app.cli.add_command(commands.create_admin)


def register_template_context(app):
    @app.context_processor
    def inject_settings():
        from bookinv.services.settings_service import SettingsService
        return {'system_settings': SettingsService.get_settings()}


def configure_logging(app):
    """配置彩色控制台日志，提升开发体验"""
    if app.debug:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)

        formatter = colorlog.ColoredFormatter(
            "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(name)s: %(message)s",
            datefmt="%H:%M:%S",
            reset=True,
            log_colors={
                'DEBUG':    'cyan',
                'INFO':     'green',
                'WARNING':  'yellow',
                'ERROR':    'red',
                'CRITICAL': 'red,bg_white',
            },
            secondary_log_colors={},
            style='%'
        )
        handler.setFormatter(formatter)
        # app.logger 即 'bookinv' 日志器，服务层子日志器会向上传递
        app.logger.setLevel(logging.INFO)
        app.logger.addHandler(handler)
