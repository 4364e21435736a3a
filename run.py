import os
from bookinv import create_app
from bookinv.extensions import db
from bookinv.models import (
    User, Category, Product, Supplier, Campus,
    Batch, InventoryLog,
    PurchaseOrder, PurchaseOrderItem,
    SalesInvoice, SalesItem,
    SystemSetting
)

# 从环境变量获取配置模式
# 支持 FLASK_ENV 或 FLASK_CONFIG
config_name = os.getenv('FLASK_ENV') or os.getenv('FLASK_CONFIG') or 'default'
if config_name in ('development', 'dev'):
    config_name = 'development'

app = create_app(config_name)


@app.shell_context_processor
def make_shell_context():
    """
    配置 Flask Shell 上下文。
    允许在命令行中使用 'flask shell' 时自动导入 db 和模型。
    """
    return dict(
        db=db,
        app=app,
        User=User,
        Category=Category,
        Product=Product,
        Supplier=Supplier,
        Campus=Campus,
        Batch=Batch,
        InventoryLog=InventoryLog,
        PurchaseOrder=PurchaseOrder,
        PurchaseOrderItem=PurchaseOrderItem,
        SalesInvoice=SalesInvoice,
        SalesItem=SalesItem,
        SystemSetting=SystemSetting,
    )


if __name__ == '__main__':
    print("-------------------------------------------------------")
    print("   BOOK INVENTORY SYSTEM                               ")
    print("   Target: Localhost:5000                              ")
    print("-------------------------------------------------------")
    app.run(host='0.0.0.0', port=5000)
