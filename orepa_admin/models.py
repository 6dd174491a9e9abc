import uuid
from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, Text, Uuid
from sqlalchemy.orm import declarative_base

Base = declarative_base()

def utcnow():
    # naive UTC, the same on PostgreSQL and SQLite
    return datetime.now(timezone.utc).replace(tzinfo=None)

# --- ROLES ---
class Role(str, Enum):
    USER = 'USER'
    MEMBER = 'MEMBER'
    MEMBER_ADMIN = 'MEMBER_ADMIN'
    CONTENT_ADMIN = 'CONTENT_ADMIN'
    NEWSLETTER_ADMIN = 'NEWSLETTER_ADMIN'
    SUPER_ADMIN = 'SUPER_ADMIN'     # highest privilege

ADMIN_ROLES = frozenset({Role.MEMBER_ADMIN, Role.CONTENT_ADMIN, Role.NEWSLETTER_ADMIN, Role.SUPER_ADMIN})

def is_admin_role(role):
    return Role(role) in ADMIN_ROLES

# --- APPROVAL STATUS ---
class AccountStatus(str, Enum):
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    SUSPENDED = 'SUSPENDED'

# --- USERS TABLE ---
class User(Base):
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # always stored lower-cased
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    name_with_initials = Column(String(200), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    address = Column(Text, nullable=False)
    phone = Column(String(30), nullable=False)

    # Academic history
    batch = Column(Integer, nullable=False)
    admission_number = Column(String(50), nullable=False)
    al_shy = Column(String(20), nullable=False)
    university = Column(String(100), nullable=False)
    faculty = Column(String(100), nullable=False)
    university_level = Column(String(30), nullable=False)
    engineering_field = Column(String(100), nullable=False)

    # Membership id, e.g. SC/26/0001
    orepa_sc_id = Column(String(20), unique=True, nullable=True, index=True)

    role = Column(String(30), nullable=False, default=Role.USER.value)
    is_admin = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=AccountStatus.PENDING.value)
    is_active = Column(Boolean, nullable=False, default=True)
    is_email_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    last_login = Column(DateTime, nullable=True)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<User {self.email} role={self.role} status={self.status}>"
