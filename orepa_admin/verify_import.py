"""Read-only check after an import or migration: user count and the newest accounts."""
import sys
import traceback
from orepa_admin import crud
from orepa_admin.db_session import database
from orepa_admin.logger import log

RECENT_LIMIT = 5
COLUMNS = ('email', 'orepa_sc_id', 'role', 'status', 'first_name')

def collect_report(db, limit=RECENT_LIMIT):
    total = crud.count_users(db)
    recent = [
        {column: getattr(user, column) for column in COLUMNS}
        for user in crud.get_recent_users(db, limit=limit)
    ]
    return total, recent

def format_table(rows):
    widths = {c: max([len(c)] + [len(str(row[c] or '')) for row in rows]) for c in COLUMNS}
    header = " | ".join(c.ljust(widths[c]) for c in COLUMNS)
    lines = [header, "-+-".join('-' * widths[c] for c in COLUMNS)]
    for row in rows:
        lines.append(" | ".join(str(row[c] or '').ljust(widths[c]) for c in COLUMNS))
    return "\n".join(lines)

def main(argv=None, engine=None):
    try:
        with database(engine=engine) as db:
            total, recent = collect_report(db)
    except Exception as e:
        log.error(f"Verification failed: {e}")
        print(f"❌ ERROR: {e}", file=sys.stderr)
        print(traceback.format_exc(), file=sys.stderr)
        return 1

    print(f"Total Users in DB: {total}")
    print(f"Recent {RECENT_LIMIT} Users:")
    print(format_table(recent))
    return 0

if __name__ == "__main__":
    sys.exit(main())
