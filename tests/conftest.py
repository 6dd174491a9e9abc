from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from orepa_admin import crud
from orepa_admin.models import Base, Role, AccountStatus


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "SUPER_ADMIN_EMAIL",
        "SUPER_ADMIN_PASSWORD",
        "SUPER_ADMIN_FIRSTNAME",
        "SUPER_ADMIN_LASTNAME",
        "IMPORT_DEFAULT_PASSWORD",
        "IMPORT_CSV_PATH",
    ):
        monkeypatch.delenv(key, raising=False)


def make_user(db, email, role=Role.MEMBER, status=AccountStatus.APPROVED, **overrides):
    fields = dict(
        first_name="Test",
        last_name="Member",
        name_with_initials="T. Member",
        date_of_birth=date(1995, 5, 5),
        address="Colombo",
        phone="0771234567",
        batch=2015,
        admission_number="1234",
        al_shy="1st shy",
        university="UOM",
        faculty="Engineering",
        university_level="Graduated",
        engineering_field="Civil",
    )
    fields.update(overrides)
    return crud.create_user(
        db,
        password=fields.pop("password", "password123"),
        email=email,
        role=role,
        status=status,
        **fields,
    )


@pytest.fixture()
def user_factory(db):
    def factory(email, **kwargs):
        return make_user(db, email, **kwargs)
    return factory
