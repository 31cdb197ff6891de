from __future__ import annotations

import pytest

from lead_finder.leads.websites import (
    SOURCE_DOMAINS,
    clean_website,
    is_valid_website,
    validate_website,
)


@pytest.mark.parametrize("url, expected", [
    ("https://WWW.Example.COM/path?x=1", "example.com"),
    ("http://acme-ai.io", "acme-ai.io"),
    ("www.stripe.com/pricing", "stripe.com"),
    ("runza.com?ref=abc", "runza.com"),
    ("runza.com#team", "runza.com"),
    ("openai.com.", "openai.com"),
    ("", "N/A"),
    (None, "N/A"),
    ("N/A", "N/A"),
    ("not a domain", "N/A"),
    ("localhost", "N/A"),
    ("shop.acme.co.uk", "N/A"),
])
def test_clean_website(url, expected):
    assert clean_website(url) == expected


def test_na_is_always_valid():
    assert is_valid_website("N/A")
    assert is_valid_website("")


@pytest.mark.parametrize("website", [
    "blog.medium.com",
    "techcrunch.com",
    "TechCrunch.com",
    "crunchbase.com",
    "example.com",
    "x.com",
])
def test_source_domains_rejected(website):
    assert not is_valid_website(website)


def test_every_deny_listed_domain_is_rejected():
    for domain in SOURCE_DOMAINS:
        assert not is_valid_website(domain), domain


@pytest.mark.parametrize("website", [
    "https://acme.com",
    "www.acme.com",
    "acme.com/about",
    "acme.com?x=1",
    "acme.com#top",
    "acme",
])
def test_unclean_or_malformed_rejected(website):
    assert not is_valid_website(website)


def test_company_domain_accepted():
    assert is_valid_website("donandmillies.com")
    assert is_valid_website("acme-ai.io")


@pytest.mark.parametrize("url", [
    "https://www.stripe.com/",
    "https://techcrunch.com/2024/01/01/acme",
    "garbage",
    "",
])
def test_validation_has_no_hidden_state(url):
    first = is_valid_website(clean_website(url))
    second = is_valid_website(clean_website(url))
    assert first == second


def test_validate_website_combines_clean_and_check():
    assert validate_website("https://www.runza.com/menu") == "runza.com"
    assert validate_website("https://techcrunch.com/article") == "N/A"
    assert validate_website("not a domain") == "N/A"
