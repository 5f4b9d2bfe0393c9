import pytest
from pydantic import ValidationError

from checklist.config import CandidateItem, ChecklistRow, DistributionEntry


def test_candidate_item_accepts_wire_names_and_is_frozen():
    item = CandidateItem.model_validate({"id": "x", "text": "t", "hyperlinks": [{"url": "http://a"}], "replyCount": 2})
    assert item.reply_count == 2
    assert item.hyperlinks[0].title is None
    with pytest.raises(ValidationError):
        item.text = "changed"


def test_distribution_entry_requires_positive_values():
    with pytest.raises(ValidationError):
        DistributionEntry(quota=0, group_count=1)
    with pytest.raises(ValidationError):
        DistributionEntry(quota=1, group_count=0)


def test_checklist_row_dumps_sheet_headers():
    row = ChecklistRow(ordinal=1, state="🆕", link="https://a", text="t")
    assert row.model_dump(by_alias=True) == {"ID": 1, "State": "🆕", "Link": "https://a", "Text": "t", "Done": ""}
