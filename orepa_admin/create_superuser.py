"""
Create a SUPER_ADMIN account directly in the database.

Run once during initial setup:

    orepa-create-superadmin
    orepa-create-superadmin --email admin@orepa.com --password '...' --firstName John --lastName Doe

Without flags the command prompts, falling back to SUPER_ADMIN_* from .env.
An existing email is never overwritten. Exit code is 0 on success, 1 otherwise.
"""
import argparse
import getpass
import sys
import traceback
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union
from sqlalchemy.exc import IntegrityError
from orepa_admin import crud
from orepa_admin.config import ADMIN_LOGIN_URL, load_superadmin_defaults
from orepa_admin.db_session import database
from orepa_admin.logger import log
from orepa_admin.models import Role, AccountStatus, User
from orepa_admin.validators import validate_credentials

# === PLACEHOLDER PROFILE ===
# The users table requires member profile fields that mean nothing for an
# admin account. These fixed values keep the insert valid.
ADMIN_PLACEHOLDERS = {
    'date_of_birth': date(1980, 1, 1),
    'address': 'OREPA Admin Office',
    'phone': '0000000000',
    'batch': 0,
    'admission_number': 'ADMIN',
    'al_shy': '1st shy',
    'university': 'UOM',
    'faculty': 'Engineering',
    'university_level': 'Graduated',
    'engineering_field': 'Computer Science',
}

# === INPUT ===
@dataclass(frozen=True)
class Credentials:
    email: str
    password: Optional[str]
    first_name: str
    last_name: str

@dataclass(frozen=True)
class ArgumentsProvided:
    credentials: Credentials

@dataclass(frozen=True)
class InteractivePrompt:
    defaults: Credentials

InputSource = Union[ArgumentsProvided, InteractivePrompt]

# === ERRORS ===
class BootstrapError(Exception):
    pass

class CredentialsInvalid(BootstrapError):
    def __init__(self, errors):
        super().__init__('; '.join(errors))
        self.errors = list(errors)

class DuplicateAccount(BootstrapError):
    def __init__(self, existing: User):
        super().__init__(f"A user with email {existing.email} already exists")
        self.existing = existing

@dataclass
class BootstrapResult:
    user: User
    # another super admin that was already there, if any
    existing_superadmin: Optional[User] = None


def build_parser():
    parser = argparse.ArgumentParser(
        prog='orepa-create-superadmin', description='Create a Super Admin account', exit_on_error=False
    )
    parser.add_argument('--email')
    parser.add_argument('--password')
    parser.add_argument('--firstName', dest='first_name')
    parser.add_argument('--lastName', dest='last_name')
    return parser

def defaults_as_credentials(defaults):
    return Credentials(
        email=defaults.email,
        password=defaults.password,
        first_name=defaults.first_name,
        last_name=defaults.last_name,
    )

def resolve_input_source(argv, defaults) -> InputSource:
    """Any argument at all means no prompting; missing flags take the defaults"""
    fallback = defaults_as_credentials(defaults)
    if not argv:
        return InteractivePrompt(defaults=fallback)

    try:
        args, unknown = build_parser().parse_known_args(argv)
    except argparse.ArgumentError as e:
        # e.g. a flag given without its value
        raise CredentialsInvalid([f'Invalid arguments: {e}'])
    if unknown:
        log.warning(f"Ignoring unknown arguments: {' '.join(unknown)}")
    return ArgumentsProvided(credentials=Credentials(
        email=args.email if args.email is not None else fallback.email,
        password=args.password if args.password is not None else fallback.password,
        first_name=args.first_name if args.first_name is not None else fallback.first_name,
        last_name=args.last_name if args.last_name is not None else fallback.last_name,
    ))

def prompt_for_credentials(defaults: Credentials, ask=input, ask_secret=getpass.getpass):
    print("\n🔐 Create Super Admin Account\n")
    print("Press Enter to use default values shown in [brackets]\n")

    email = ask(f"Email [{defaults.email}]: ").strip()
    # never echo the default password back
    hint = "from SUPER_ADMIN_PASSWORD" if defaults.password else "not set"
    password = ask_secret(f"Password [{hint}]: ").strip()
    first_name = ask(f"First Name [{defaults.first_name}]: ").strip()
    last_name = ask(f"Last Name [{defaults.last_name}]: ").strip()

    return Credentials(
        email=email or defaults.email,
        password=password or defaults.password,
        first_name=first_name or defaults.first_name,
        last_name=last_name or defaults.last_name,
    )

def read_credentials(source: InputSource, ask=input, ask_secret=getpass.getpass) -> Credentials:
    if isinstance(source, ArgumentsProvided):
        print("📝 Using credentials from command-line arguments")
        return source.credentials
    return prompt_for_credentials(source.defaults, ask=ask, ask_secret=ask_secret)


# === CORE ===
def placeholder_fields(credentials: Credentials):
    fields = dict(ADMIN_PLACEHOLDERS)
    fields['name_with_initials'] = f"{credentials.first_name[0]}. {credentials.last_name}"
    return fields

def create_superuser(db, credentials: Credentials) -> BootstrapResult:
    """
    Validate, refuse duplicates, then insert one SUPER_ADMIN.

    Raises CredentialsInvalid before any query and DuplicateAccount before
    any write. Database errors propagate to the caller.
    """
    errors = validate_credentials(
        credentials.email, credentials.password, credentials.first_name, credentials.last_name
    )
    if errors:
        raise CredentialsInvalid(errors)

    email = credentials.email.strip().lower()

    log.info("Checking for existing Super Admin accounts...")
    existing = crud.get_user_by_email(db, email)
    if existing:
        raise DuplicateAccount(existing)

    existing_superadmin = crud.get_first_user_by_role(db, Role.SUPER_ADMIN)
    if existing_superadmin:
        log.warning(f"Super Admin {existing_superadmin.email} already exists, creating an additional one")

    user = crud.create_user(
        db,
        password=credentials.password,
        email=email,
        first_name=credentials.first_name,
        last_name=credentials.last_name,
        role=Role.SUPER_ADMIN,
        status=AccountStatus.APPROVED,
        is_active=True,
        is_email_verified=True,
        **placeholder_fields(credentials),
    )
    log.info(f"Super Admin {user.email} created with id {user.id}")
    return BootstrapResult(user=user, existing_superadmin=existing_superadmin)


# === OUTPUT ===
def print_summary(credentials: Credentials):
    print("\n📋 Credentials Summary:")
    print(f"   Email: {credentials.email}")
    print(f"   Name: {credentials.first_name} {credentials.last_name}")
    print(f"   Password: {'*' * len(credentials.password or '')} (hidden)\n")

def print_success(result: BootstrapResult, credentials: Credentials):
    user = result.user
    if result.existing_superadmin:
        other = result.existing_superadmin
        print("\n⚠️  INFO: A Super Admin account already exists in the database.")
        print(f"   Email: {other.email}")
        print(f"   Name: {other.full_name}")
        print("   An additional Super Admin account was created.\n")

    print("========================================")
    print("  🎉 SUCCESS! Super Admin Created")
    print("========================================\n")

    # SENSITIVE: the only place the plaintext password is ever shown
    print("📧 Login Credentials (SENSITIVE, do not share or paste into logs):")
    print(f"   Email:    {user.email}")
    print(f"   Password: {credentials.password}")
    print("\n⚠️  Store these in a password manager and change the password after first login.\n")

    print(f"🌐 Login URL: {ADMIN_LOGIN_URL}\n")

    print("📊 Account Details:")
    print(f"   User ID:   {user.id}")
    print(f"   Role:      {user.role}")
    print(f"   Status:    {user.status}")
    print(f"   Created:   {user.created_at.isoformat()}\n")

def print_validation_errors(errors):
    print("❌ Validation Errors:", file=sys.stderr)
    for error in errors:
        print(f"   - {error}", file=sys.stderr)

def print_error(title, exc):
    print(f"\n❌ ERROR: {title}\n", file=sys.stderr)
    print("Error Details:", file=sys.stderr)
    print(f"   Message: {exc}", file=sys.stderr)
    print(f"   Trace:\n{traceback.format_exc()}", file=sys.stderr)


def run(db, credentials: Credentials) -> int:
    """Create the account and report; returns the process exit code"""
    print_summary(credentials)
    try:
        result = create_superuser(db, credentials)
    except CredentialsInvalid as e:
        print_validation_errors(e.errors)
        return 1
    except DuplicateAccount as e:
        print("\n⚠️  WARNING: A user with this email already exists!", file=sys.stderr)
        print(f"   Email:  {e.existing.email}", file=sys.stderr)
        print(f"   Role:   {e.existing.role}", file=sys.stderr)
        print(f"   Status: {e.existing.status}", file=sys.stderr)
        print("\n❌ Cannot create duplicate account. Exiting...\n", file=sys.stderr)
        return 1
    except IntegrityError as e:
        # another run inserted the same email between our check and insert
        db.rollback()
        log.error(f"Unique constraint violated: {e.orig}")
        print_error("Account violates a unique constraint (was it created concurrently?)", e)
        return 1
    except Exception as e:
        db.rollback()
        log.error(f"Super Admin creation failed: {e}")
        print_error("Failed to create Super Admin account", e)
        return 1

    print_success(result, credentials)
    return 0

def main(argv=None, engine=None, ask=input, ask_secret=getpass.getpass):
    argv = sys.argv[1:] if argv is None else argv

    print("\n========================================")
    print("  OREPA - Create Super Admin Account")
    print("========================================\n")

    try:
        source = resolve_input_source(argv, load_superadmin_defaults())
    except CredentialsInvalid as e:
        print_validation_errors(e.errors)
        return 1

    try:
        with database(engine=engine) as db:
            credentials = read_credentials(source, ask=ask, ask_secret=ask_secret)
            return run(db, credentials)
    except Exception as e:
        # engine construction or session teardown failed
        print_error("Failed to create Super Admin account", e)
        return 1

if __name__ == "__main__":
    sys.exit(main())
