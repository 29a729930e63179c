import pytest
from shared.validation import is_valid_email


@pytest.mark.parametrize(
    "email",
    [
        "user@example.com",
        "user.name@example.com",
        "user+tag@example.com",
        "user@sub.domain.com",
        "a@b.cc",
    ],
    ids=["simple", "dotted_local", "plus_tag", "subdomain", "minimal"],
)
def test_valid_email_addresses(email):
    assert is_valid_email(email)


@pytest.mark.parametrize(
    "email",
    [
        "plainaddress",
        "@example.com",
        "user@",
        "user@@example.com",
        "user@example",
        ".user@example.com",
        "user..name@example.com",
        "user@-example.com",
        "user name@example.com",
        "user;x@example.com",
    ],
    ids=[
        "no_at",
        "no_local",
        "no_domain",
        "double_at",
        "no_tld",
        "leading_dot",
        "consecutive_dots",
        "hyphen_label",
        "space",
        "semicolon",
    ],
)
def test_invalid_email_addresses(email):
    assert not is_valid_email(email)
