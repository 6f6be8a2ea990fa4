from __future__ import annotations

import re

import pytest

from srf_api.domain.collections import Collection
from srf_api.repositories.memory_storage import MemoryStore
from srf_api.services.submission_service import SubmissionService, ValidationError, parse_int

TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


@pytest.fixture()
def svc():
    return SubmissionService(MemoryStore())


def test_parse_int_follows_leading_integer_rules():
    assert parse_int("3") == 3
    assert parse_int(3) == 3
    assert parse_int(3.7) == 3
    assert parse_int(" 4 parcels") == 4
    assert parse_int("-2") == -2
    assert parse_int("abc") is None
    assert parse_int("") is None
    assert parse_int(None) is None
    assert parse_int(True) is None


def test_donation_defaults(svc):
    entry, count = svc.submit_donation({"name": "Asha", "email": "a@x.com", "phone": "555"})
    assert count == 1
    assert entry["parcelCount"] == 1
    assert entry["totalAmount"] == 75
    assert entry["parcelName"] == ""
    assert TIMESTAMP.match(entry["date"])
    assert svc.donation_count() == 1


@pytest.mark.parametrize(
    "parcel_count,total,expected_count,expected_total",
    [
        ("4", None, 4, 300),
        ("abc", "xyz", 1, 75),
        (2, "500", 2, 500),
        ("0", None, 1, 75),
        ("-3", None, 1, 75),
        ("3", "0", 3, 225),
    ],
)
def test_donation_coercions(svc, parcel_count, total, expected_count, expected_total):
    payload = {"name": "A", "email": "a@x.com", "phone": "1", "parcelCount": parcel_count}
    if total is not None:
        payload["totalAmount"] = total
    entry, _ = svc.submit_donation(payload)
    assert entry["parcelCount"] == expected_count
    assert entry["totalAmount"] == expected_total


def test_client_supplied_date_is_ignored(svc):
    entry, _ = svc.submit_donation(
        {"name": "A", "email": "a@x.com", "phone": "1", "date": "1999-01-01T00:00:00.000Z"}
    )
    assert entry["date"] != "1999-01-01T00:00:00.000Z"


@pytest.mark.parametrize("missing", ["name", "email", "phone"])
def test_donation_requires_contact_fields(svc, missing):
    payload = {"name": "A", "email": "a@x.com", "phone": "1"}
    payload[missing] = "   "
    with pytest.raises(ValidationError) as err:
        svc.submit_donation(payload)
    assert err.value.message == "Name, email, and phone are required."
    assert svc.donation_count() == 0


def test_volunteer_requires_help_and_defaults_message(svc):
    with pytest.raises(ValidationError):
        svc.submit_volunteer({"name": "V", "email": "v@x.com", "phone": "1"})
    assert svc.store.count(Collection.VOLUNTEER) == 0

    entry = svc.submit_volunteer({"name": "V", "email": "v@x.com", "phone": "1", "help": "Cooking"})
    assert entry["message"] == ""
    assert entry["help"] == "Cooking"
    assert svc.store.count(Collection.VOLUNTEER) == 1


def test_newsletter_dedupes_case_variants(svc):
    assert svc.subscribe_newsletter({"email": "A@X.com"}) is True
    assert svc.subscribe_newsletter({"email": "a@x.com"}) is False
    assert svc.store.count(Collection.NEWSLETTER) == 1


def test_newsletter_requires_email(svc):
    with pytest.raises(ValidationError) as err:
        svc.subscribe_newsletter({})
    assert err.value.message == "Email is required."


def test_contact_requires_every_field(svc):
    with pytest.raises(ValidationError) as err:
        svc.submit_contact({"name": "C", "email": "c@x.com"})
    assert err.value.message == "All fields are required."
    entry = svc.submit_contact({"name": "C", "email": "c@x.com", "message": "Hello"})
    assert set(entry) == {"name", "email", "message", "date"}


def test_parse_int_clamps_very_long_digit_strings():
    assert parse_int("1" + "0" * 30) == 10**18
    assert parse_int("-" + "9" * 5000) == -(10**18)
    assert parse_int("000042") == 42


@pytest.mark.parametrize(
    "extra",
    [
        {"parcelCount": "1" + "0" * 30},
        {"parcelCount": 10_001},
        {"totalAmount": 10**12},
        {"totalAmount": 1e300},
        {"parcelCount": "9" * 5000},
    ],
)
def test_donation_rejects_out_of_range_numbers(svc, extra):
    payload = {"name": "A", "email": "a@x.com", "phone": "1", **extra}
    with pytest.raises(ValidationError) as err:
        svc.submit_donation(payload)
    assert err.value.message == "Parcel count or amount is out of range."
    assert svc.donation_count() == 0


def test_overlong_email_is_rejected_everywhere(svc):
    email = "a" * 320 + "@x.com"
    with pytest.raises(ValidationError):
        svc.submit_contact({"name": "C", "email": email, "message": "Hi"})
    with pytest.raises(ValidationError):
        svc.subscribe_newsletter({"email": email})
    assert svc.store.count(Collection.CONTACT) == 0
    assert svc.store.count(Collection.NEWSLETTER) == 0
