# 按照依赖顺序导入
from .base import BaseModel
from .auth import User
from .catalog import Category, Product, Supplier, Campus
from .stock import Batch, InventoryLog
from .purchase import PurchaseOrder, PurchaseOrderItem
from .sales import SalesInvoice, SalesItem
from .settings import SystemSetting
