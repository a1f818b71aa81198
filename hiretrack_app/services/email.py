"""
Email sending services using Resend API.

Without RESEND_API_KEY messages are logged instead of sent, which keeps
development and test runs offline.
"""
import logging
import re
import requests
from flask import current_app
from hiretrack_app.models import EmailTemplate
from hiretrack_app.utils.constants import DEFAULT_EMAIL_TEMPLATES, GENERAL_POOL_LABEL

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


def send_email(to, subject, html_content):
    """Send one message. Returns {'success': bool, ...}; never raises."""
    api_key = current_app.config.get('RESEND_API_KEY')
    if not api_key:
        logger.info("Email (not sent, no RESEND_API_KEY) to=%s subject=%s", to, subject)
        return {'success': True, 'mocked': True}

    try:
        response = requests.post(
            RESEND_URL,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json"
            },
            json={
                "from": current_app.config['EMAIL_FROM'],
                "to": [to],
                "subject": subject,
                "html": html_content
            },
            timeout=30
        )
    except requests.RequestException as e:
        logger.error("Email to %s failed: %s", to, e)
        return {'success': False, 'error': str(e)}

    if response.status_code == 200:
        return {'success': True, 'message_id': response.json().get('id')}
    logger.error("Email to %s rejected by Resend: %s", to, response.text)
    return {'success': False, 'error': response.text}


def resolve_template(text, variables):
    """Replace {{name}} placeholders; unknown names become empty strings."""
    return re.sub(r'\{\{\s*(\w+)\s*\}\}', lambda m: str(variables.get(m.group(1), '')), text)


def get_template(template_type):
    """Stored template or the built-in default, as {'subject', 'body'}."""
    stored = EmailTemplate.query.filter_by(type=template_type).first()
    if stored:
        return {'subject': stored.subject, 'body': stored.body}
    return dict(DEFAULT_EMAIL_TEMPLATES[template_type])


def applicant_variables(applicant):
    return {
        'firstName': applicant.first_name,
        'lastName': applicant.last_name,
        'fullName': applicant.full_name,
        'jobTitle': applicant.job.title if applicant.job else GENERAL_POOL_LABEL,
    }


def send_templated_email(template_type, applicant, subject=None, body=None):
    template = get_template(template_type)
    variables = applicant_variables(applicant)
    return send_email(
        applicant.email,
        resolve_template(subject or template['subject'], variables),
        resolve_template(body or template['body'], variables),
    )


def send_thank_you_email(applicant):
    return send_templated_email('thank_you', applicant)


def send_rejection_email(applicant, subject=None, body=None):
    return send_templated_email('rejection', applicant, subject, body)


def send_review_request_email(reviewer, applicant, requested_by, message=None):
    base_url = current_app.config['PUBLIC_BASE_URL']
    link = f"{base_url}/applicants/{applicant.id}"
    job_title = applicant.job.title if applicant.job else GENERAL_POOL_LABEL
    html_content = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <p>Hi {reviewer.name},</p>
        <p>{requested_by.name} asked you to review <strong>{applicant.full_name}</strong>
        for {job_title}.</p>
        {f'<p>{message}</p>' if message else ''}
        <p><a href="{link}">Open the applicant</a></p>
    </div>
    """
    return send_email(reviewer.email, f"Review requested: {applicant.full_name}", html_content)
