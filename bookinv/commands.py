import random
from datetime import date, timedelta

import click
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from bookinv.extensions import db
from bookinv.models.auth import User
from bookinv.models.catalog import Category, Product, Supplier, Campus
from bookinv.models.stock import Batch, InventoryLog
from bookinv.models.purchase import PurchaseOrder
from bookinv.models.sales import SalesInvoice
from bookinv.services.catalog_service import CatalogService
from bookinv.services.inventory_service import InventoryService
from bookinv.services.purchase_service import PurchaseService
from bookinv.services.sales_service import SalesService
from bookinv.utils.fake_gen import fake


@click.command('status')
@with_appcontext
def status():
    """查看当前数据库中的数据统计"""
    click.echo(click.style('📊 图书进销存数据库状态:', fg='cyan', bold=True))

    try:
        counts = [
            ('用户 (Users)', User.query.count()),
            ('图书 (Products)', Product.query.count()),
            ('供应商 (Suppliers)', Supplier.query.count()),
            ('校区 (Campuses)', Campus.query.count()),
            ('批次 (Batches)', Batch.query.count()),
            ('采购单 (Purchase Orders)', PurchaseOrder.query.count()),
            ('发票 (Invoices)', SalesInvoice.query.count()),
            ('库存流水 (Logs)', InventoryLog.query.count()),
        ]
    except SQLAlchemyError as e:
        click.echo(click.style(f'✘ 数据库读取失败: {e}', fg='red'))
        click.echo("请检查是否执行了 'flask db upgrade'")
        return

    for label, count in counts:
        click.echo(f" - {label}: \t{count}")

    if counts[1][1] > 0:
        click.echo(click.style('✔ 数据库连接正常，数据已存在。', fg='green'))
    else:
        click.echo(click.style('⚠ 数据库为空，请运行 flask forge 生成数据。', fg='yellow'))


@click.command('create-admin')
@click.argument('email')
@click.argument('password')
@with_appcontext
def create_admin(email, password):
    """创建管理员账号 (已存在则重置密码并提升为管理员)"""
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email, username=email.split('@')[0])
        db.session.add(user)
    user.password = password
    user.role = User.ROLE_ADMIN
    user.is_active_user = True
    db.session.commit()
    click.echo(click.style(f'✔ 管理员 {email} 已就绪', fg='green'))


@click.command('forge')
@click.option('--scale', default=1, help='数据规模倍数 (默认1倍)')
@with_appcontext
def forge(scale):
    """
    初始化并填充演示数据
    采购单与发票通过业务服务生成，批次与流水与真实操作一致。
    警告：这将清除数据库中的现有数据！
    """
    click.echo(click.style(f'⚡ 初始化演示数据 (规模: {scale}x)...', fg='cyan', bold=True))

    # 1. 清除旧数据
    db.drop_all()
    db.create_all()

    admin = User(email='admin@example.com', username='admin', role=User.ROLE_ADMIN)
    admin.password = 'admin'
    db.session.add(admin)
    db.session.commit()

    # 2. 基础资料
    click.echo('正在创建基础资料...')
    products, suppliers, campuses = init_catalog(scale)

    # 3. 采购入库
    click.echo('正在生成采购订单并收货...')
    init_purchases(products, suppliers, scale)

    # 4. 销售出库
    click.echo('正在生成销售发票...')
    init_sales(products, campuses, scale)

    click.echo(click.style('✔ 演示数据构建完成！', fg='green', bold=True))
    click.echo("管理员账号: admin@example.com / 密码: admin")


def init_catalog(scale=1):
    """分类、图书、供应商、校区"""
    categories = [CatalogService.create(Category, {'name': name})
                  for name in fake.book_categories(min(6, 2 + 2 * scale))]

    product_count = 20 * scale
    products = []
    for i in range(product_count):
        products.append(CatalogService.create(Product, {
            'title': fake.book_title(),
            'author': fake.name(),
            'edition': fake.book_edition(),
            'isbn': fake.isbn13(),
            'sku': f'BK-{i + 1:05d}',
            'category_id': random.choice(categories).id,
            'reorder_level': random.choice([5, 10, 15, 20]),
        }))
    click.echo(f'  ✓ 已创建 {product_count} 本图书')

    suppliers = [CatalogService.create(Supplier, {
        'name': fake.publisher_name(),
        'contact_person': fake.name(),
        'phone': fake.phone_number()[:32],
        'email': fake.company_email(),
        'address': fake.address().replace('\n', ', '),
        'payment_terms': random.choice(['Net 15', 'Net 30', 'Net 60', 'Cash on delivery']),
    }) for _ in range(3 * scale)]

    campuses = [CatalogService.create(Campus, {
        'name': fake.campus_name(),
        'location': fake.city(),
        'contact_person': fake.name(),
        'phone': fake.phone_number()[:32],
        'email': fake.email(),
    }) for _ in range(4 * scale)]
    click.echo(f'  ✓ 已创建 {len(suppliers)} 个供应商、{len(campuses)} 个校区')
    return products, suppliers, campuses


def init_purchases(products, suppliers, scale=1):
    """生成采购单，大部分收货入库，少量保持待收货"""
    order_count = 10 * scale
    today = date.today()
    for i in range(order_count):
        lines = random.sample(products, k=min(len(products), random.randint(1, 4)))
        po = PurchaseService.create_purchase_order(
            supplier_id=random.choice(suppliers).id,
            order_date=today - timedelta(days=random.randint(10, 90)),
            items_data=[{
                'product_id': p.id,
                'quantity': random.randint(20, 120),
                'unit_price': round(random.uniform(150, 900), 2),
            } for p in lines]
        )
        if random.random() < 0.8:
            expiry = today + timedelta(days=random.randint(-10, 720)) if random.random() < 0.3 else None
            PurchaseService.receive_order(po.id, f'B{today:%y%m}-{i + 1:03d}', expiry)
    click.echo(f'  ✓ 已创建 {order_count} 个采购单')


def init_sales(products, campuses, scale=1):
    """按可售批次生成发票，数量不超过批次库存"""
    invoice_count = 15 * scale
    created = 0
    for _ in range(invoice_count):
        lines = []
        for product in random.sample(products, k=min(len(products), random.randint(1, 3))):
            batches = InventoryService.available_batches(product.id)
            if not batches:
                continue
            batch = random.choice(batches)
            lines.append({
                'product_id': product.id,
                'batch_id': batch['id'],
                'quantity': random.randint(1, min(10, batch['quantity'])),
                'unit_price': round(batch['cost_price'] * random.uniform(1.1, 1.6), 2),
            })
        if not lines:
            continue
        discount = random.choice([0, 0, 5, 10])

        _, _, total = SalesService.compute_totals(lines, discount)
        # 约六成发票全额付款，其余待付款
        paid = total if random.random() < 0.6 else round(total * random.choice([0, 0.5]), 2)
        SalesService.create_invoice(
            campus_id=random.choice(campuses).id,
            invoice_date=date.today() - timedelta(days=random.randint(0, 30)),
            items_data=lines,
            discount_percentage=discount,
            paid_amount=paid
        )
        created += 1
    click.echo(f'  ✓ 已创建 {created} 张发票')
