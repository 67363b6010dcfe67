"""Planner URL validation: domain check and planner UUID extraction."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from planner_extractor.extraction.errors import InvalidDomain, MissingPlannerId
from planner_extractor.extraction.models import PlannerReference

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


def _host_matches(host: str, domain: str) -> bool:
    host = host.lower().rstrip(".")
    domain = domain.lower()
    return host == domain or host.endswith("." + domain)


def extract_planner_id(url: str) -> str | None:
    """Return the first UUID found anywhere in *url*, uppercased, or ``None``."""
    match = _UUID_RE.search(url)
    return match.group(0).upper() if match else None


def validate_planner_url(url: str, domain: str) -> PlannerReference:
    """Validate *url* against the planner *domain* and extract its planner id.

    Pure string work, no network I/O.

    Raises:
        InvalidDomain: The host is neither *domain* nor one of its subdomains.
        MissingPlannerId: No 8-4-4-4-12 hex UUID appears in the URL.
    """
    url = url.strip()
    try:
        host = urlsplit(url).hostname
    except ValueError:
        host = None
    if not host or not _host_matches(host, domain):
        raise InvalidDomain(f"URL host must be {domain} or a subdomain of it")

    planner_id = extract_planner_id(url)
    if planner_id is None:
        raise MissingPlannerId("No planner UUID found in URL")
    return PlannerReference(planner_url=url, planner_id=planner_id)
