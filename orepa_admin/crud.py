import bcrypt
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session
from orepa_admin.models import User, Role, AccountStatus, is_admin_role

# --- PASSWORDS ---
def hash_password(password: str) -> str:
    """bcrypt with a fresh salt per password"""
    pwd_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(pwd_bytes, salt).decode('utf-8')

def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))

# --- LOOKUPS ---
def get_user_by_email(db: Session, email: str):
    # case-insensitive even for rows written before emails were normalised
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

def get_first_user_by_role(db: Session, role: Role):
    return db.query(User).filter(User.role == Role(role).value).order_by(User.created_at).first()

def count_users(db: Session) -> int:
    return db.query(User).count()

def get_recent_users(db: Session, limit: int = 5):
    return db.query(User).order_by(User.created_at.desc()).limit(limit).all()

# --- MEMBERSHIP IDS ---
def generate_orepa_sc_id(db: Session, now=None) -> str:
    """Next id for the current year: SC/26/0001, SC/26/0002, ..."""
    year = (now or datetime.now()).strftime('%y')
    prefix = f"SC/{year}/"

    last = (
        db.query(User.orepa_sc_id)
        .filter(User.orepa_sc_id.like(f"{prefix}%"))
        # SC/26/10000 must rank above SC/26/9999
        .order_by(func.length(User.orepa_sc_id).desc(), User.orepa_sc_id.desc())
        .first()
    )

    sequence = 1
    if last and last[0]:
        parts = last[0].split('/')
        if len(parts) == 3 and parts[2].isdigit():
            sequence = int(parts[2]) + 1

    return f"{prefix}{sequence:04d}"

# --- CREATE ---
def create_user(db: Session, password: str, **fields) -> User:
    """
    Insert one user and commit. The password is hashed here, the email is
    lower-cased and is_admin follows the role. IntegrityError propagates.
    """
    role = Role(fields.pop('role', Role.USER))
    if 'status' in fields:
        fields['status'] = AccountStatus(fields['status']).value
    user = User(
        password_hash=hash_password(password),
        role=role.value,
        is_admin=is_admin_role(role),
        **fields,
    )
    user.email = user.email.strip().lower()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
