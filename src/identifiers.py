"""Guess LinkedIn company identifiers (URL slugs) from display names."""

from __future__ import annotations

import re
from types import MappingProxyType

# Checked in order; the first key contained in the lowercased name wins, so
# longer names sit before the short fragments they contain.
KNOWN_COMPANY_IDS = MappingProxyType(
    {
        "rtl nederland": "rtl-nederland",
        "rtl": "rtl-nederland",
        "npo": "npo",
        "nederlandse publieke omroep": "npo",
        "dpg media": "dpg-media",
        "dpg": "dpg-media",
        "talpa": "talpanetwork",
        "talpa network": "talpanetwork",
        "shell": "shell",
        "essent": "essent",
        "vattenfall": "vattenfall",
        "eneco": "eneco",
        "kpn": "kpn",
        "booking.com": "booking-com",
        "booking": "booking-com",
        "ing group": "ing",
        "ing": "ing",
        "abn amro": "abnamro",
        "abn": "abnamro",
        "rabobank": "rabobank",
        "philips": "philips",
        "heineken": "heineken",
        "unilever": "unilever",
        "asml": "asml",
        "kpmg": "kpmg",
        "pwc": "pwc",
        "deloitte": "deloitte",
        "ey": "ey",
        "tata steel": "tata-steel-europe",
        "bol.com": "bol-com",
        "bol": "bol-com",
        "ibm": "ibm",
        "microsoft": "microsoft",
        "google": "google",
        "amazon": "amazon",
    }
)

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(name: str) -> str:
    slug = _NON_SLUG_CHARS.sub("", name.strip().lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def generate_linkedin_id(company_name: str) -> str:
    """Best-effort LinkedIn slug for *company_name*.

    The result is a guess: callers must expect the provider to answer
    "not found" for it.
    """
    lowered = company_name.lower()
    for fragment, slug in KNOWN_COMPANY_IDS.items():
        if fragment in lowered:
            return slug
    return slugify(company_name)
