import pytest

from auth import check_auth, secret_matches
from core.config import Config


@pytest.mark.parametrize(
    "provided, expected, result",
    [
        ("s3cret", "s3cret", True),
        ("s3cret", "other", False),
        ("S3CRET", "s3cret", False),
        (None, "s3cret", False),
        ("", "s3cret", False),
        ("", "", False),
        ("anything", "", False),
        ("pässwörd", "pässwörd", True),
    ],
)
def test_secret_matches(provided, expected, result):
    assert secret_matches(provided, expected) is result


def test_check_auth_reports_configured_secret():
    assert check_auth(Config(secret="s3cret")) is True


def test_check_auth_reports_missing_secret():
    assert check_auth(Config()) is False
