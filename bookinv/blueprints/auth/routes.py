from datetime import datetime
from urllib.parse import urlsplit

from flask import render_template, redirect, request, url_for, flash, current_app
from flask_login import login_user, logout_user, login_required, current_user

from bookinv.extensions import db
from bookinv.models.auth import User
from bookinv.blueprints.auth import auth_bp
from bookinv.blueprints.auth.forms import LoginForm


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    # 已登录直接跳到首页
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data.strip().lower()).first()

        if user is None or not user.verify_password(form.password.data):
            current_app.logger.warning(f'登录失败: {form.email.data}')
            flash('邮箱或密码错误。', 'danger')
            return redirect(url_for('auth.login'))

        if not user.is_active:
            flash('该账户已被停用，请联系管理员。', 'danger')
            return redirect(url_for('auth.login'))

        login_user(user, remember=form.remember_me.data)
        user.last_login = datetime.utcnow()
        db.session.commit()

        # 只允许站内跳转
        next_page = request.args.get('next')
        if not next_page or urlsplit(next_page).netloc != '':
            next_page = url_for('main.index')

        flash(f'欢迎回来，{user.username or user.email}。', 'success')
        return redirect(next_page)

    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout')
@login_required
def logout():
    logout_user()
    flash('您已退出登录。', 'info')
    return redirect(url_for('auth.login'))
