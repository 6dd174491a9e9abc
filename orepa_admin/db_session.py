from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from orepa_admin.config import get_database_url
from orepa_admin.logger import log

def create_db_engine(url=None):
    """Build the engine. Nothing connects until the first query."""
    url = url or get_database_url()
    # pool_pre_ping drops connections that died while idle
    return create_engine(url, echo=False, pool_pre_ping=True)

def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

@contextmanager
def database(url=None, engine=None):
    """
    Scoped database handle for one command run:

        with database() as db:
            ...

    The session is closed on every exit path. The engine is disposed too
    when it was created here; a caller-supplied engine stays open.
    """
    owns_engine = engine is None
    if owns_engine:
        engine = create_db_engine(url)

    db = make_session_factory(engine)()
    log.info("--- DB: Session opened. ---")
    try:
        yield db
    finally:
        db.close()
        if owns_engine:
            engine.dispose()
        log.info("--- DB: Connection closed. ---")
