from flask_wtf import FlaskForm
from wtforms import StringField, DecimalField, TextAreaField, SubmitField
from wtforms.validators import Optional, Length, Email, NumberRange


class SettingsForm(FlaskForm):
    """系统设置表单"""
    company_name = StringField('公司名称', validators=[Optional(), Length(max=128)])
    company_address = TextAreaField('公司地址', validators=[Optional()])
    company_phone = StringField('公司电话', validators=[Optional(), Length(max=32)])
    company_email = StringField('公司邮箱', validators=[Optional(), Email(message='邮箱格式不正确')])
    warehouse_name = StringField('仓库名称', validators=[Optional(), Length(max=128)])
    warehouse_address = TextAreaField('仓库地址', validators=[Optional()])
    tax_rate = DecimalField('税率 (%)', places=2, validators=[Optional(), NumberRange(min=0)])
    currency = StringField('货币', validators=[Optional(), Length(max=8)])
    submit = SubmitField('保存设置')
