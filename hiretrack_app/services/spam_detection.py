"""
Heuristic spam detection for public application submissions.

Checks run in a fixed order and stop at the first hit, so a result carries
exactly one reason.
"""
import re
from dataclasses import dataclass, field
from flask import request

HONEYPOT_FIELD = 'website2'

DISPOSABLE_EMAIL_DOMAINS = frozenset([
    'mailinator.com', 'guerrillamail.com', 'tempmail.com', 'yopmail.com',
    'throwaway.email', 'sharklasers.com', 'guerrillamailblock.com', 'grr.la',
    'guerrillamail.info', 'guerrillamail.net', 'trashmail.com', 'trashmail.me',
    'trashmail.net', 'dispostable.com', 'maildrop.cc', 'mailnesia.com',
    'guerrillamail.de', 'temp-mail.org', 'fakeinbox.com', 'tempail.com',
    'tempr.email', 'discard.email', 'mailcatch.com', 'getairmail.com',
    'mohmal.com', 'emailondeck.com', 'mytemp.email', 'getnada.com',
    'burnermail.io', 'harakirimail.com', 'tmail.ws',
])

SPAM_PHRASES = (
    'buy now', 'click here', 'free money', 'viagra', 'casino',
    'crypto invest', 'earn money fast', 'work from home opportunity',
    'act now', 'limited time offer', 'you have been selected',
    'congratulations you won', 'make money online', 'double your income',
    'no obligation', 'risk free', 'online pharmacy', 'weight loss',
    'nigerian prince', 'wire transfer',
)

NAME_URL_PATTERNS = ('http', '://', '.com', '.net', '.org', 'www.')


@dataclass
class SpamCheckResult:
    is_spam: bool
    reasons: list = field(default_factory=list)
    client_ip: str = 'unknown'


def get_client_ip(req=None):
    """First X-Forwarded-For hop, else the socket peer, else 'unknown'."""
    req = req or request
    forwarded = req.headers.get('X-Forwarded-For')
    if forwarded:
        first = forwarded.split(',')[0].strip()
        if first:
            return first
    return req.remote_addr or 'unknown'


def check_spam(first_name, last_name, email, cover_letter=None, honeypot=None, req=None):
    """Classify a submission; pure apart from reading the request's address."""
    client_ip = get_client_ip(req)

    def spam(reason):
        return SpamCheckResult(is_spam=True, reasons=[reason], client_ip=client_ip)

    if honeypot:
        return spam('Honeypot field filled')

    full_name = f"{first_name} {last_name}".lower()
    if any(pattern in full_name for pattern in NAME_URL_PATTERNS):
        return spam('URL detected in name field')

    domain = email.rsplit('@', 1)[-1].lower() if '@' in email else ''
    if domain in DISPOSABLE_EMAIL_DOMAINS:
        return spam('Disposable email domain')

    combined = f"{first_name}{last_name}"
    if len(combined) > 4 and combined == combined.upper() and re.search(r'[A-Z]', combined):
        return spam('All-caps name')

    if cover_letter:
        lowered = cover_letter.lower()
        for phrase in SPAM_PHRASES:
            if phrase in lowered:
                return spam(f'Spam phrase in cover letter: {phrase}')

    return SpamCheckResult(is_spam=False, reasons=[], client_ip=client_ip)
