import sys
import time
from sqlalchemy import text
from orepa_admin.config import get_init_db_retries, get_init_db_retry_delay
from orepa_admin.db_session import create_db_engine
from orepa_admin.logger import log
# Importing the models registers their tables on Base.metadata
from orepa_admin.models import Base

def init_db_tables(engine, retries=None, delay=None, sleep=time.sleep):
    """
    1. Waits for the database to accept connections.
    2. Creates missing tables.
    Rows are never written here; the first admin comes from orepa-create-superadmin.
    """
    retries = get_init_db_retries() if retries is None else retries
    delay = get_init_db_retry_delay() if delay is None else delay

    while retries > 0:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            retries -= 1
            log.warning(f"--- DB Not ready: {e}. Retrying in {delay}s ({retries} left)... ---")
            if retries > 0:
                sleep(delay)
            continue

        log.info("--- DB: Connected. ---")
        Base.metadata.create_all(bind=engine)
        log.info("--- DB: Tables verified/created. ---")
        return True

    log.error("--- DB: Could not connect after retries ---")
    return False

def main(argv=None, engine=None):
    owns_engine = engine is None
    engine = engine or create_db_engine()
    try:
        print("🚀 Starting DB initialization...")
        ok = init_db_tables(engine)
    finally:
        if owns_engine:
            engine.dispose()
    print("✅ Initialization finished." if ok else "❌ Initialization failed.")
    return 0 if ok else 1

if __name__ == "__main__":
    sys.exit(main())
