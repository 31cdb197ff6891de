"""Lead merging: segment filter, name deduplication, website validation."""

from __future__ import annotations

import logging

from lead_finder.leads.segments import matches_segment
from lead_finder.leads.websites import validate_website
from lead_finder.models import Lead, SearchFilters

logger = logging.getLogger(__name__)


def normalize_company_name(name: str) -> str:
    return name.lower().strip()


class LeadMerger:
    """Merges lead batches for one request.

    The set of seen company names lives on the instance, so feeding several
    batches through the same merger deduplicates across all of them.
    Output keeps input order.
    """

    def __init__(self, filters: SearchFilters):
        self.filters = filters
        self._seen: set[str] = set()

    def merge(self, leads: list[Lead]) -> list[Lead]:
        filtered = self._filter_segment(leads)
        unique = self._deduplicate(filtered)
        for lead in unique:
            self._fix_website(lead)
        return unique

    def _filter_segment(self, leads: list[Lead]) -> list[Lead]:
        if not self.filters.icp:
            return leads
        kept = [
            lead for lead in leads
            if matches_segment(lead.employee_count, self.filters.icp)
        ]
        if len(kept) < len(leads):
            logger.info(
                "Segment filter %r dropped %d of %d leads",
                self.filters.icp, len(leads) - len(kept), len(leads),
            )
        return kept

    def _deduplicate(self, leads: list[Lead]) -> list[Lead]:
        unique = []
        for lead in leads:
            key = normalize_company_name(lead.company_name)
            if key in self._seen:
                logger.debug("Duplicate lead dropped: %s", lead.company_name)
                continue
            self._seen.add(key)
            unique.append(lead)
        return unique

    @staticmethod
    def _fix_website(lead: Lead) -> None:
        original = lead.website
        lead.website = validate_website(original)
        if lead.website != original:
            logger.debug(
                "Website for %s rewritten: %r -> %r",
                lead.company_name, original, lead.website,
            )


def merge_leads(leads: list[Lead], filters: SearchFilters) -> list[Lead]:
    """One-shot merge of a complete lead list."""
    return LeadMerger(filters).merge(leads)
