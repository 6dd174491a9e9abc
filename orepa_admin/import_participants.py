"""
Bulk import of participants from the membership CSV export.

    orepa-import-participants [path/to/participants.csv]

Every imported member gets IMPORT_DEFAULT_PASSWORD (hashed), a fresh
SC/YY/NNNN id, and is approved and verified. Rows without an email, or
with an email already in the database, are skipped.
"""
import csv
import sys
from dataclasses import dataclass
from datetime import date
from orepa_admin import crud
from orepa_admin.config import get_import_csv_path, get_import_default_password
from orepa_admin.db_session import database
from orepa_admin.logger import log
from orepa_admin.models import Role, AccountStatus

DEFAULT_DOB = date(2000, 1, 1)

@dataclass
class ImportStats:
    success: int = 0
    skipped: int = 0
    errors: int = 0

def read_rows(path):
    with open(path, newline='', encoding='utf-8-sig') as f:
        return list(csv.DictReader(f))

def split_name(full_name):
    parts = (full_name or '').split()
    first_name = parts[0] if parts else 'Member'
    last_name = ' '.join(parts[1:]) if len(parts) > 1 else 'Member'
    return first_name, last_name

def parse_batch(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0

def map_record(record):
    """CSV row -> user fields, without email, password and membership id"""
    full_name = (record.get('full_name') or '').strip()
    first_name, last_name = split_name(full_name)
    return {
        'first_name': first_name,
        'last_name': last_name,
        'name_with_initials': record.get('name_with_initials') or full_name,
        'date_of_birth': DEFAULT_DOB,
        'address': record.get('address') or '',
        'phone': record.get('phone') or '',
        'batch': parse_batch(record.get('batch')),
        'admission_number': record.get('school_admission_number') or record.get('membership_id') or '',
        'al_shy': record.get('last_year_sat_for_a_l') or '',
        'university': record.get('university') or '',
        'faculty': record.get('faculty') or '',
        'university_level': record.get('university_level') or '',
        'engineering_field': record.get('department') or '',
    }

def import_records(db, records, default_password):
    stats = ImportStats()

    for record in records:
        email = (record.get('email') or '').strip().lower()
        if not email:
            log.warning(f"Skipping record with no email: {record.get('full_name')}")
            stats.skipped += 1
            continue

        try:
            if crud.get_user_by_email(db, email):
                log.info(f"User already exists: {email}. Skipping.")
                stats.skipped += 1
                continue

            sc_id = crud.generate_orepa_sc_id(db)
            crud.create_user(
                db,
                password=default_password,
                email=email,
                orepa_sc_id=sc_id,
                role=Role.MEMBER,
                status=AccountStatus.APPROVED,
                is_active=True,
                is_email_verified=True,
                **map_record(record),
            )
            log.info(f"Imported: {email} with ID: {sc_id}")
            stats.success += 1
        except Exception as e:
            db.rollback()
            log.error(f"Error processing record {email}: {e}")
            stats.errors += 1

    return stats

def main(argv=None, engine=None):
    argv = sys.argv[1:] if argv is None else argv

    default_password = get_import_default_password()
    if not default_password:
        print("Error: IMPORT_DEFAULT_PASSWORD environment variable is not set.", file=sys.stderr)
        return 1

    path = argv[0] if argv else get_import_csv_path()
    log.info(f"Starting CSV import from {path}...")
    try:
        records = read_rows(path)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        print(f"Error reading CSV: {e}", file=sys.stderr)
        return 1
    log.info(f"Parsed {len(records)} records. Processing...")

    with database(engine=engine) as db:
        stats = import_records(db, records, default_password)

    print("--------------------------------------------------")
    print("Import Complete.")
    print(f"Success: {stats.success}")
    print(f"Skipped: {stats.skipped}")
    print(f"Errors:  {stats.errors}")
    print("--------------------------------------------------")
    return 0

if __name__ == "__main__":
    sys.exit(main())
