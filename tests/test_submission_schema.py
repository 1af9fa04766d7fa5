"""
Tests for PresidentSubmission parsing and normalization
"""
import pytest

from app.schemas.submission import PresidentSubmission, normalize_website_url

COMPLETE = {
    "club_name": "Chess Club",
    "meeting_frequency": "weekly",
    "meeting_time_type": "lunch",
    "meeting_days": ["Monday"],
    "meeting_room": "B12",
}


def parse(**values):
    return PresidentSubmission.model_validate(values)


def test_complete_payload_has_nothing_missing():
    assert parse(**COMPLETE).missing_fields() == []


def test_null_and_non_string_values_become_empty():
    submission = parse(club_name=None, meeting_room=["B12"], description={"text": "x"})

    assert submission.club_name == ""
    assert submission.meeting_room == ""
    assert submission.description == ""


def test_numbers_become_text():
    assert parse(meeting_room=204).meeting_room == "204"


def test_text_is_trimmed():
    submission = parse(club_name="  Chess Club ", description="\n hello  ")

    assert submission.club_name == "Chess Club"
    assert submission.description == "hello"


def test_password_is_not_trimmed():
    assert parse(president_submit_password=" pw ").president_submit_password == " pw "


def test_non_list_tags_become_empty():
    submission = parse(meeting_days="Monday", categories=None, fields={"STEM": True})

    assert submission.meeting_days == []
    assert submission.categories == []
    assert submission.fields == []


@pytest.mark.parametrize("value, expected", [
    (True, True),
    ("true", True),
    ("TRUE", True),
    ("1", True),
    ("yes", True),
    ("on", True),
    (1, True),
    (False, False),
    ("false", False),
    ("0", False),
    ("", False),
    (0, False),
    (None, False),
])
def test_flag_coercion(value, expected):
    assert parse(volunteer_hours=value).volunteer_hours is expected


def test_missing_field_order_for_after_school():
    submission = parse(meeting_time_type="after_school")

    assert submission.missing_fields() == [
        "club_name",
        "meeting_frequency",
        "meeting_days",
        "meeting_time_range",
        "meeting_room",
    ]


def test_word_count_uses_whitespace():
    assert parse(description="one  two\nthree\tfour").description_word_count() == 4
    assert parse(description="").description_word_count() == 0


def test_normalized_tags_are_deduplicated():
    submission = parse(
        meeting_days=["Friday", "Monday", "Friday", "Funday"],
        categories=["outreach", "outreach", "unknown"],
        fields=["STEM", " STEM ", ""],
        subfields=["Biology", "", "Biology"],
    )

    assert submission.normalized_meeting_days == ["Friday", "Monday"]
    assert submission.normalized_categories == ["outreach"]
    assert submission.normalized_fields == ["STEM"]
    assert submission.normalized_subfields == ["Biology"]


def test_tag_labels_are_deduplicated_ignoring_case():
    submission = parse(fields=["STEM", "stem", "Humanities"], subfields=["biology", "Biology"])

    assert submission.normalized_fields == ["STEM", "Humanities"]
    assert submission.normalized_subfields == ["biology"]


def test_values_within_column_widths():
    assert parse(**COMPLETE, fields=["F" * 100], website_url="chess.example.org").overlong_fields() == []


def test_overlong_values_listed_in_column_order():
    submission = parse(
        **COMPLETE,
        subfields=["Biology", "S" * 101],
        president_contact="p" * 256,
        website_url="x" * 505 + ".org",
    )

    assert submission.overlong_fields() == ["president_contact", "website_url", "subfields"]


def test_subject_is_first_field():
    assert parse(fields=["Humanities", "STEM"]).subject == "Humanities"
    assert parse().subject == "Other"


def test_prerequisites_only_kept_when_required():
    assert parse(prerequisites="Algebra").normalized_prerequisites == ""
    assert parse(prerequisites="Algebra", prereq_required="yes").normalized_prerequisites == "Algebra"


@pytest.mark.parametrize("url, expected", [
    ("", None),
    (None, None),
    ("https://chess.example.org", "https://chess.example.org"),
    ("HTTP://chess.example.org", "HTTP://chess.example.org"),
    ("chess.example.org", "https://chess.example.org"),
    ("www.chess.org/club", "https://www.chess.org/club"),
    ("//chess.example.org", "https://chess.example.org"),
    ("localhost", "localhost"),
])
def test_normalize_website_url(url, expected):
    assert normalize_website_url(url) == expected
