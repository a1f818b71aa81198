"""
User model: staff accounts with role-scoped access.
"""
import json
from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from hiretrack_app.models.base import db, generate_uuid, iso, load_json_list


class User(UserMixin, db.Model):
    """Staff user. Applicants never log in."""
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    role = db.Column(db.String(30), nullable=False, default='reviewer')  # admin, hiring_manager, reviewer

    # Hiring manager scope; NULL means unrestricted
    scoped_departments = db.Column(db.Text)  # JSON list
    scoped_offices = db.Column(db.Text)  # JSON list of office ids
    scope_mode = db.Column(db.String(10), default='or')  # or, and

    event_access = db.Column(db.Boolean, default=True, nullable=False)
    offer_access = db.Column(db.Boolean, default=False, nullable=False)

    # Bumped on password change so previously issued tokens stop working
    token_version = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login_at = db.Column(db.DateTime)

    def set_password(self, password):
        # Use pbkdf2 instead of scrypt for compatibility with LibreSSL
        self.password_hash = generate_password_hash(password, method='pbkdf2:sha256')

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def department_scope(self):
        return load_json_list(self.scoped_departments)

    @department_scope.setter
    def department_scope(self, values):
        self.scoped_departments = json.dumps(values) if values is not None else None

    @property
    def office_scope(self):
        return load_json_list(self.scoped_offices)

    @office_scope.setter
    def office_scope(self, values):
        self.scoped_offices = json.dumps(values) if values is not None else None

    @property
    def is_admin(self):
        return self.role == 'admin'

    @property
    def is_hiring_manager(self):
        return self.role == 'hiring_manager'

    @property
    def is_reviewer(self):
        return self.role == 'reviewer'

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role,
            'scoped_departments': self.department_scope,
            'scoped_offices': self.office_scope,
            'scope_mode': self.scope_mode or 'or',
            'event_access': self.event_access,
            'offer_access': self.offer_access,
            'created_at': iso(self.created_at),
            'last_login_at': iso(self.last_login_at),
        }
