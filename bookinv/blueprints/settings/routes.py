"""系统设置路由"""
from flask import render_template, request, flash, redirect, url_for
from flask_login import login_required
from bookinv.blueprints.settings import settings_bp
from bookinv.blueprints.settings.forms import SettingsForm
from bookinv.exceptions import BookInvException
from bookinv.services.settings_service import SettingsService
from bookinv.utils.decorators import admin_required


@settings_bp.route('/', methods=['GET', 'POST'])
@login_required
@admin_required
def index():
    form = SettingsForm()

    if form.validate_on_submit():
        data = {name: form[name].data for name in SettingsService.FIELDS}
        try:
            SettingsService.update_settings(data)
            flash('系统设置已保存', 'success')
            return redirect(url_for('settings.index'))
        except BookInvException as e:
            flash(e.message, 'danger')
    elif request.method == 'GET':
        current = SettingsService.get_settings()
        for name in SettingsService.FIELDS:
            form[name].data = current.get(name)

    return render_template('settings/index.html', form=form)
