import pandas as pd
import pytest

from checklist.config import AttendeeRecord
from checklist.errors import RosterFormatError, RosterMismatch
from checklist.roster import (
    backup_records,
    display_name,
    load_roster,
    normalize_legal_name,
    resolve_labels,
)


def test_labels_without_roster_are_ordinals():
    assert resolve_labels(None, 3) == ["No. 1", "No. 2", "No. 3"]


def test_duplicate_names_get_email_handle():
    records = [
        AttendeeRecord(nickname="Amy", email="amy.chen@example.com"),
        AttendeeRecord(nickname="Amy", email="amy.lin@example.com"),
        AttendeeRecord(nickname="Ben", email="ben@example.com"),
    ]
    assert resolve_labels(records, 3) == ["Amy (amy.chen)", "Amy (amy.lin)", "Ben"]


def test_display_name_fallbacks():
    assert display_name(AttendeeRecord(nickname="  Nick  ", name="王小明")) == "Nick"
    assert display_name(AttendeeRecord(name="王小明")) == "小明"
    assert display_name(AttendeeRecord(name="Alexander")) == "Alexander"
    assert display_name(AttendeeRecord(email="someone@example.com")) == "someone"


def test_normalize_legal_name_only_trims_three_char_names():
    assert normalize_legal_name(" 陳大文 ") == "大文"
    assert normalize_legal_name("歐陽娜娜") == "歐陽娜娜"
    assert normalize_legal_name("") == ""


def test_resolve_labels_requires_matching_length():
    with pytest.raises(RosterMismatch) as exc:
        resolve_labels([AttendeeRecord(nickname="A")], 2)
    assert exc.value.roster_size == 1
    assert exc.value.group_count == 2


def test_backup_records_are_distinct():
    records = [AttendeeRecord(nickname="Amy", email="amy@example.com")] + backup_records(2)
    assert resolve_labels(records, 3) == ["Amy", "Backup 1", "Backup 2"]


def test_load_roster_filters_and_dedupes(tmp_path):
    path = tmp_path / "attendees.csv"
    pd.DataFrame(
        {
            "Nickname": ["Amy", "", "Ghost", "Amy again", "Carl"],
            "Name": ["", "王小明", "Casper", "", "Carl Sagan"],
            "Email": ["amy@x.org", "ming@x.org", "ghost@x.org", "AMY@x.org", "carl@x.org"],
            "Status": ["activated", "Activated", "cancelled", "activated", "activated"],
        }
    ).to_csv(path, index=False)

    records = load_roster(path)
    assert [r.email for r in records] == ["amy@x.org", "ming@x.org", "carl@x.org"]
    assert [display_name(r) for r in records] == ["Amy", "小明", "Carl"]


def test_load_roster_without_status_column(tmp_path):
    path = tmp_path / "attendees.xlsx"
    pd.DataFrame({"暱稱": ["A", "B"], "電子郵件": ["a@x", "b@x"]}).to_excel(path, index=False)
    records = load_roster(path)
    assert [r.nickname for r in records] == ["A", "B"]


def test_load_roster_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_roster(tmp_path / "nope.csv")


@pytest.mark.parametrize(
    "filename, content",
    [
        ("empty.csv", b""),
        ("corrupt.xlsx", b"this is not a zip archive"),
        ("broken.csv", b'nickname,email\n"unterminated,a@x\n'),
    ],
)
def test_load_roster_unreadable_file(tmp_path, filename, content):
    path = tmp_path / filename
    path.write_bytes(content)
    with pytest.raises(RosterFormatError):
        load_roster(path)
