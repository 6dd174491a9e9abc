import csv
from datetime import date, datetime

import pytest

from orepa_admin import crud
from orepa_admin import import_participants
from orepa_admin.models import Role, User

HEADER = [
    "full_name", "name_with_initials", "membership_id", "address", "phone", "email", "batch",
    "school_admission_number", "last_year_sat_for_a_l", "university", "faculty", "department",
    "batch_of_university", "university_level", "mailing_list", "id",
]


def write_csv(path, rows):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=HEADER)
        writer.writeheader()
        for row in rows:
            writer.writerow({key: row.get(key, "") for key in HEADER})
    return path


def participant(email, full_name="Kasun Perera Silva", **extra):
    row = {
        "full_name": full_name,
        "name_with_initials": "K. P. Silva",
        "membership_id": "M-01",
        "address": "Kandy",
        "phone": "0711111111",
        "email": email,
        "batch": "2016",
        "school_admission_number": "5678",
        "last_year_sat_for_a_l": "2nd shy",
        "university": "UOP",
        "faculty": "Engineering",
        "department": "Electrical",
        "university_level": "Third Year",
    }
    row.update(extra)
    return row


@pytest.fixture()
def import_password(monkeypatch):
    monkeypatch.setenv("IMPORT_DEFAULT_PASSWORD", "welcome2026")
    return "welcome2026"


def test_import_creates_approved_members(engine, db, tmp_path, import_password, capsys):
    path = write_csv(tmp_path / "p.csv", [participant(" Kasun@Mail.com "), participant("nimal@mail.com", full_name="Nimal")])

    assert import_participants.main([str(path)], engine=engine) == 0

    out = capsys.readouterr().out
    assert "Success: 2" in out
    db.expire_all()
    kasun = crud.get_user_by_email(db, "kasun@mail.com")
    assert kasun.email == "kasun@mail.com"
    assert kasun.first_name == "Kasun"
    assert kasun.last_name == "Perera Silva"
    assert kasun.role == Role.MEMBER.value
    assert kasun.status == "APPROVED"
    assert kasun.is_active and kasun.is_email_verified
    assert kasun.is_admin is False
    assert kasun.batch == 2016
    assert kasun.admission_number == "5678"
    assert kasun.al_shy == "2nd shy"
    assert kasun.engineering_field == "Electrical"
    assert kasun.date_of_birth == date(2000, 1, 1)
    assert crud.check_password(import_password, kasun.password_hash)

    nimal = crud.get_user_by_email(db, "nimal@mail.com")
    assert nimal.last_name == "Member"

    year = datetime.now().strftime("%y")
    assert kasun.orepa_sc_id == f"SC/{year}/0001"
    assert nimal.orepa_sc_id == f"SC/{year}/0002"


def test_import_skips_missing_and_existing_emails(engine, db, tmp_path, import_password, user_factory):
    user_factory("exists@mail.com")
    path = write_csv(tmp_path / "p.csv", [participant(""), participant("EXISTS@mail.com"), participant("new@mail.com")])

    records = import_participants.read_rows(path)
    stats = import_participants.import_records(db, records, import_password)

    assert (stats.success, stats.skipped, stats.errors) == (1, 2, 0)
    assert db.query(User).count() == 2


def test_failed_record_is_counted_and_import_continues(db, tmp_path, import_password, monkeypatch):
    real_create = crud.create_user

    def flaky_create(db, password, **fields):
        if fields["email"] == "bad@mail.com":
            raise RuntimeError("constraint failed")
        return real_create(db, password, **fields)

    monkeypatch.setattr(crud, "create_user", flaky_create)
    records = [participant("bad@mail.com"), participant("good@mail.com")]

    stats = import_participants.import_records(db, records, import_password)

    assert (stats.success, stats.skipped, stats.errors) == (1, 0, 1)
    assert crud.get_user_by_email(db, "good@mail.com") is not None


def test_import_requires_default_password(engine, tmp_path, capsys):
    path = write_csv(tmp_path / "p.csv", [participant("a@mail.com")])

    assert import_participants.main([str(path)], engine=engine) == 1
    assert "IMPORT_DEFAULT_PASSWORD" in capsys.readouterr().err


def test_import_reports_missing_file(engine, tmp_path, import_password):
    assert import_participants.main([str(tmp_path / "missing.csv")], engine=engine) == 1


def test_bad_batch_becomes_zero():
    fields = import_participants.map_record(participant("a@mail.com", batch="n/a"))
    assert fields["batch"] == 0


def test_admission_number_falls_back_to_membership_id():
    fields = import_participants.map_record(participant("a@mail.com", school_admission_number=""))
    assert fields["admission_number"] == "M-01"


def test_split_name_defaults():
    assert import_participants.split_name("") == ("Member", "Member")
    assert import_participants.split_name("Ravi") == ("Ravi", "Member")


def test_import_reports_non_utf8_file(engine, tmp_path, import_password, capsys):
    path = tmp_path / "excel.csv"
    path.write_bytes(",".join(HEADER).encode("ascii") + b"\r\nJos\xe9 Perera,,,,,jose@mail.com\r\n")

    assert import_participants.main([str(path)], engine=engine) == 1
    assert "Error reading CSV" in capsys.readouterr().err
