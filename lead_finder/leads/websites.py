"""Website normalisation and company-domain validation."""

from __future__ import annotations

import logging
import re

from lead_finder.models import NOT_AVAILABLE

logger = logging.getLogger(__name__)

# Bare "label.tld" shape: one label, letters/digits/hyphens, alphabetic TLD
_DOMAIN_PATTERN = re.compile(r"^[a-z0-9-]+\.[a-z]{2,}$", re.IGNORECASE)
_PROTOCOL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_WWW_PATTERN = re.compile(r"^www\.", re.IGNORECASE)

# Domains that are where a lead was found, never the lead's own homepage
SOURCE_DOMAINS: tuple[str, ...] = (
    # Placeholder/test domains
    "example.com",
    "company.com",
    "startup.com",
    "business.com",
    "test.com",
    "demo.com",
    "placeholder.com",
    # News sites
    "techcrunch.com",
    "bloomberg.com",
    "forbes.com",
    "venturebeat.com",
    "theverge.com",
    "wired.com",
    "reuters.com",
    "wsj.com",
    "ft.com",
    "theinformation.com",
    "techmeme.com",
    "businessinsider.com",
    "cnbc.com",
    "techradar.com",
    # Databases/directories
    "crunchbase.com",
    "pitchbook.com",
    "producthunt.com",
    "ycombinator.com",
    "angellist.com",
    "wellfound.com",
    # Social media
    "linkedin.com",
    "twitter.com",
    "x.com",
    "facebook.com",
    "instagram.com",
    "youtube.com",
    "tiktok.com",
    # Blog platforms
    "medium.com",
    "substack.com",
    "wordpress.com",
    "blogger.com",
    "tumblr.com",
    "ghost.io",
    "notion.site",
    "hashnode.com",
    "dev.to",
    # Content sites often confused with company websites
    "mashed.com",
    "thetakeout.com",
    "wikipedia.org",
    "autoevolution.com",
    "eatthis.com",
    "tastingtable.com",
    "delish.com",
    "eater.com",
)


def _is_missing(value: str | None) -> bool:
    return not value or value.strip() == "" or value.strip() == NOT_AVAILABLE


def clean_website(url: str | None) -> str:
    """Reduce a URL to its bare root domain.

    e.g. "https://WWW.Example.COM/path?x=1" -> "example.com"
    Returns "N/A" when nothing domain-shaped remains.
    """
    if _is_missing(url):
        return NOT_AVAILABLE

    cleaned = url.strip()
    cleaned = _PROTOCOL_PATTERN.sub("", cleaned)
    cleaned = _WWW_PATTERN.sub("", cleaned)
    cleaned = re.split(r"[/?#]", cleaned, maxsplit=1)[0]
    cleaned = cleaned.rstrip(".").lower()

    if not _DOMAIN_PATTERN.match(cleaned):
        logger.debug("Could not extract a domain from %r", url)
        return NOT_AVAILABLE
    return cleaned


def is_valid_website(website: str | None) -> bool:
    """Check a website is a bare company domain and not a known source site.

    "N/A" is always valid.
    """
    if _is_missing(website):
        return True

    if _PROTOCOL_PATTERN.match(website):
        logger.debug("Rejected website with protocol: %s", website)
        return False
    if _WWW_PATTERN.match(website):
        logger.debug("Rejected website with www.: %s", website)
        return False
    if "/" in website or "?" in website or "#" in website:
        logger.debug("Rejected website with path/query/fragment: %s", website)
        return False

    website_lower = website.lower()
    for source_domain in SOURCE_DOMAINS:
        if source_domain in website_lower:
            logger.debug("Rejected source domain %s (contains %s)", website, source_domain)
            return False

    if not _DOMAIN_PATTERN.match(website):
        logger.debug("Rejected malformed domain: %s", website)
        return False
    return True


def validate_website(url: str | None) -> str:
    """Clean then validate; anything that fails comes back as "N/A"."""
    cleaned = clean_website(url)
    if not is_valid_website(cleaned):
        return NOT_AVAILABLE
    return cleaned
