"""采购管理表单"""
from flask_wtf import FlaskForm
from wtforms import StringField, DateField, SelectField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Optional, Length


class PurchaseOrderForm(FlaskForm):
    """采购订单表单 (明细行以 product_id[] / quantity[] / unit_price[] 数组提交)"""
    supplier_id = SelectField('供应商', coerce=str, validators=[DataRequired(message='请选择供应商')])
    order_date = DateField('下单日期', validators=[DataRequired(message='请选择下单日期')])
    expected_delivery = DateField('预计到货', validators=[Optional()])
    notes = TextAreaField('备注', validators=[Optional()])
    submit = SubmitField('创建采购单')


class ReceiveForm(FlaskForm):
    """收货表单"""
    batch_number = StringField('批次号', validators=[DataRequired(message='请输入批次号'), Length(max=64)])
    expiry_date = DateField('有效期', validators=[Optional()])
    submit = SubmitField('确认收货')
