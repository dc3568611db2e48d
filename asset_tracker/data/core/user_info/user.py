from asset_tracker import db
from asset_tracker.buisness.core.authorization import Role
from asset_tracker.data.core.timestamped_base import TimestampedBase, isoformat
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin


class User(UserMixin, TimestampedBase):
    __tablename__ = 'users'

    name = db.Column(db.String(120), nullable=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(Role, name='user_role', native_enum=False, length=20),
                     nullable=False, default=Role.USER)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def display_name(self):
        return self.name or self.email

    def to_dict(self, include_timestamps=False):
        data = {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role.value if self.role else None,
        }
        if include_timestamps:
            data['createdAt'] = isoformat(self.created_at)
        return data

    def __repr__(self):
        return f'<User {self.email} ({self.role.value if self.role else "?"})>'
