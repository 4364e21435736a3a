"""基础资料表单"""
from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, SelectField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Optional, Length, NumberRange, Email
from bookinv.utils.validators import validate_isbn, validate_sku


class CategoryForm(FlaskForm):
    """图书分类表单"""
    name = StringField('分类名称', validators=[DataRequired(message='请输入分类名称'), Length(max=128)])
    description = TextAreaField('描述', validators=[Optional()])
    submit = SubmitField('保存')


class ProductForm(FlaskForm):
    """图书表单"""
    title = StringField('书名', validators=[DataRequired(message='请输入书名'), Length(max=256)])
    author = StringField('作者', validators=[Optional(), Length(max=128)])
    edition = StringField('版次', validators=[Optional(), Length(max=64)])
    isbn = StringField('ISBN', validators=[Optional(), validate_isbn])
    sku = StringField('SKU', validators=[Optional(), Length(max=64), validate_sku])
    category_id = SelectField('分类', coerce=str, validators=[Optional()])
    reorder_level = IntegerField('补货阈值', default=10, validators=[
        Optional(), NumberRange(min=0, message='补货阈值不能为负')
    ])
    description = TextAreaField('简介', validators=[Optional()])
    submit = SubmitField('保存')


class SupplierForm(FlaskForm):
    """供应商表单"""
    name = StringField('供应商名称', validators=[DataRequired(message='请输入供应商名称'), Length(max=128)])
    contact_person = StringField('联系人', validators=[Optional(), Length(max=64)])
    phone = StringField('电话', validators=[Optional(), Length(max=32)])
    email = StringField('邮箱', validators=[Optional(), Email(message='邮箱格式不正确')])
    address = StringField('地址', validators=[Optional(), Length(max=256)])
    payment_terms = StringField('付款条件', validators=[Optional(), Length(max=128)])
    notes = TextAreaField('备注', validators=[Optional()])
    submit = SubmitField('保存')


class CampusForm(FlaskForm):
    """校区表单"""
    name = StringField('校区名称', validators=[DataRequired(message='请输入校区名称'), Length(max=128)])
    location = StringField('位置', validators=[Optional(), Length(max=256)])
    contact_person = StringField('联系人', validators=[Optional(), Length(max=64)])
    phone = StringField('电话', validators=[Optional(), Length(max=32)])
    email = StringField('邮箱', validators=[Optional(), Email(message='邮箱格式不正确')])
    submit = SubmitField('保存')
