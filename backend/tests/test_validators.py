"""
Tests for the pre-persist event validator and slug derivation.
"""

import re

import pytest

from devevents.core.errors import ValidationError
from devevents.models.event import REQUIRED_TEXT_FIELDS
from devevents.services.validators import derive_slug, validate_event

from conftest import make_event_payload

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


@pytest.mark.parametrize(
    "title, expected",
    [
        ("My Talk!!", "my-talk"),
        ("  React Summit  ", "react-summit"),
        ("Café Déjà Vu", "cafe-deja-vu"),
        ("AI/ML   Night -- 2026", "ai-ml-night-2026"),
    ],
)
def test_derive_slug(title, expected):
    assert derive_slug(title) == expected


@pytest.mark.parametrize(
    "title",
    ["Next.js Conf 2026", "PyCon US: Pittsburgh", "Rust & WebAssembly", "Über Meetup #3"],
)
def test_derived_slug_is_url_safe(title):
    slug = validate_event(make_event_payload(title=title), changed=(), is_new=True)["slug"]
    assert slug
    assert SLUG_PATTERN.match(slug)


def test_title_without_letters_or_digits_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_event(make_event_payload(title="!!!"), changed=(), is_new=True)
    assert exc_info.value.field == "title"


def test_slug_kept_when_title_unchanged():
    stored = {**make_event_payload(), "slug": "custom-slug"}
    result = validate_event(stored, changed={"venue"}, is_new=False)
    assert result["slug"] == "custom-slug"


def test_slug_regenerated_when_title_changes():
    stored = {**make_event_payload(title="Renamed Event"), "slug": "old-slug"}
    result = validate_event(stored, changed={"title"}, is_new=False)
    assert result["slug"] == "renamed-event"


@pytest.mark.parametrize(
    "value",
    ["2024-13-01", "2024-02-30", "2026/10/25", "26-10-25", "2026-10-25T09:00", "", "2026-1-05"],
)
def test_invalid_dates_rejected(value):
    with pytest.raises(ValidationError) as exc_info:
        validate_event(make_event_payload(date=value), changed=(), is_new=True)
    assert exc_info.value.field == "date"


def test_valid_date_accepted():
    result = validate_event(make_event_payload(date="2026-10-25"), changed=(), is_new=True)
    assert result["date"] == "2026-10-25"


def test_leap_day_accepted():
    validate_event(make_event_payload(date="2028-02-29"), changed=(), is_new=True)


def test_blank_time_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_event(make_event_payload(time="   "), changed=(), is_new=True)
    assert exc_info.value.field == "time"


@pytest.mark.parametrize("field", REQUIRED_TEXT_FIELDS)
def test_blank_required_field_on_new_record(field):
    payload = make_event_payload(**{field: "  "})
    with pytest.raises(ValidationError) as exc_info:
        validate_event(payload, changed=(), is_new=True)
    assert exc_info.value.field == field


def test_unchanged_fields_not_revalidated_on_update():
    # A legacy bad date is left alone when only the venue changes
    stored = {**make_event_payload(date="2024-02-30"), "slug": "next-js-conf-2026"}
    validate_event(stored, changed={"venue"}, is_new=False)


def test_changed_blank_field_rejected_on_update():
    stored = {**make_event_payload(venue=""), "slug": "next-js-conf-2026"}
    with pytest.raises(ValidationError) as exc_info:
        validate_event(stored, changed={"venue"}, is_new=False)
    assert exc_info.value.field == "venue"
