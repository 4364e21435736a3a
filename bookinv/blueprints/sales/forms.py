"""销售管理表单"""
from flask_wtf import FlaskForm
from wtforms import DateField, DecimalField, SelectField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Optional, NumberRange


class SalesInvoiceForm(FlaskForm):
    """
    销售发票表单
    明细行以 product_id[] / batch_id[] / quantity[] / unit_price[] 数组提交
    """
    campus_id = SelectField('校区', coerce=str, validators=[DataRequired(message='请选择校区')])
    invoice_date = DateField('开票日期', validators=[DataRequired(message='请选择开票日期')])
    discount_percentage = DecimalField('折扣 (%)', places=2, default=0, validators=[
        Optional(), NumberRange(min=0, max=100, message='折扣比例须在 0 到 100 之间')
    ])
    paid_amount = DecimalField('已付金额', places=2, default=0, validators=[
        Optional(), NumberRange(min=0, message='已付金额不能为负')
    ])
    notes = TextAreaField('备注', validators=[Optional()])
    submit = SubmitField('开具发票')
