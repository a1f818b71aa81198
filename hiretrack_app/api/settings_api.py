"""
Site settings and email template API routes.
"""
from flask import Blueprint, g, jsonify
from flask_login import current_user
from hiretrack_app.models import db, EmailTemplate, SiteSetting
from hiretrack_app.schemas import EmailTemplateSchema, SiteSettingSchema
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.services.email import get_template
from hiretrack_app.utils.auth import role_required
from hiretrack_app.utils.constants import EMAIL_TEMPLATE_TYPES, PUBLIC_SITE_SETTING_KEYS
from hiretrack_app.utils.validation import validate_body

bp = Blueprint('settings_api', __name__, url_prefix='/api/settings')


def _setting_value(key):
    setting = db.session.get(SiteSetting, key)
    return setting.value if setting else ''


@bp.route('/site/public/<key>', methods=['GET'])
def get_public_setting(key):
    """Careers-site blurbs; only whitelisted keys are exposed."""
    if key not in PUBLIC_SITE_SETTING_KEYS:
        return jsonify({'error': 'Setting not found'}), 404
    return jsonify({'key': key, 'value': _setting_value(key)})


@bp.route('/site/<key>', methods=['GET'])
@role_required('admin', 'hiring_manager')
def get_setting(key):
    return jsonify({'key': key, 'value': _setting_value(key)})


@bp.route('/site/<key>', methods=['PUT'])
@role_required('admin', 'hiring_manager')
@validate_body(SiteSettingSchema)
def put_setting(key):
    if len(key) > 100:
        return jsonify({'error': 'Setting key too long'}), 400

    setting = db.session.get(SiteSetting, key)
    if setting is None:
        setting = SiteSetting(key=key)
        db.session.add(setting)
    setting.value = g.data.value
    db.session.commit()

    log_activity('site_setting_updated', user_id=current_user.id, details={'key': key})
    return jsonify(setting.to_dict())


@bp.route('/email-templates', methods=['GET'])
@role_required('admin', 'hiring_manager')
def list_email_templates():
    return jsonify([dict(get_template(t), type=t) for t in EMAIL_TEMPLATE_TYPES])


@bp.route('/email-templates/<template_type>', methods=['GET'])
@role_required('admin', 'hiring_manager')
def get_email_template(template_type):
    if template_type not in EMAIL_TEMPLATE_TYPES:
        return jsonify({'error': 'Template not found'}), 404
    return jsonify(dict(get_template(template_type), type=template_type))


@bp.route('/email-templates/<template_type>', methods=['PUT'])
@role_required('admin', 'hiring_manager')
@validate_body(EmailTemplateSchema)
def put_email_template(template_type):
    if template_type not in EMAIL_TEMPLATE_TYPES:
        return jsonify({'error': 'Template not found'}), 404

    template = EmailTemplate.query.filter_by(type=template_type).first()
    if template is None:
        template = EmailTemplate(type=template_type)
        db.session.add(template)
    template.subject = g.data.subject
    template.body = g.data.body
    template.updated_by_id = current_user.id
    db.session.commit()

    log_activity('email_template_updated', user_id=current_user.id, details={'type': template_type})
    return jsonify(template.to_dict())
