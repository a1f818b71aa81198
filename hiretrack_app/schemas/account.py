"""
Auth, user, notification and settings request bodies.
"""
from typing import List, Optional
from pydantic import Field
from hiretrack_app.schemas.common import RequestSchema, EmailAddress, Password, choice, plain_text, rich_text
from hiretrack_app.utils.constants import ROLES, SUBSCRIPTION_TYPES


class LoginSchema(RequestSchema):
    email: EmailAddress
    password: str = Field(min_length=1, max_length=128)


class PasswordChangeSchema(RequestSchema):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: Password


class UserCreateSchema(RequestSchema):
    email: EmailAddress
    password: Password
    name: plain_text(200, required='Name is required')
    role: choice(ROLES, 'role') = 'reviewer'
    scoped_departments: Optional[List[plain_text(100)]] = None
    scoped_offices: Optional[List[str]] = None
    scope_mode: choice(('or', 'and'), 'scope mode') = 'or'
    event_access: bool = True
    offer_access: bool = False


class UserUpdateSchema(RequestSchema):
    email: Optional[EmailAddress] = None
    password: Optional[Password] = None
    name: Optional[plain_text(200, required='Name is required')] = None
    role: Optional[choice(ROLES, 'role')] = None
    scoped_departments: Optional[List[plain_text(100)]] = None
    scoped_offices: Optional[List[str]] = None
    scope_mode: Optional[choice(('or', 'and'), 'scope mode')] = None
    event_access: Optional[bool] = None
    offer_access: Optional[bool] = None


class SubscriptionItem(RequestSchema):
    type: choice(SUBSCRIPTION_TYPES, 'subscription type')
    value: Optional[plain_text(255)] = None


class SubscriptionsSchema(RequestSchema):
    """Full replacement of the user's subscriptions."""
    subscriptions: List[SubscriptionItem] = Field(max_length=200)


class SiteSettingSchema(RequestSchema):
    value: rich_text(20000)


class EmailTemplateSchema(RequestSchema):
    subject: plain_text(500, required='Subject is required')
    body: rich_text(20000, required='Body is required')
