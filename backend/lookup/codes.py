"""Value-based care procedure code table.

Single source of truth for the HCPCS codes reported in every billing
breakdown. Breakdowns are seeded from this table and rows are folded
into it; codes not listed here are ignored.
"""

from __future__ import annotations

# Reporting period of the CMS datasets queried
REPORTING_YEAR = 2023

# HCPCS code -> display name
VBC_CODES: dict[str, str] = {
    "99490": "CCM",
    "99491": "CCM Complex",
    "99453": "RPM Setup",
    "99454": "RPM Device",
    "99457": "RPM Mgmt",
    "99458": "RPM Addl",
    "G0438": "AWV Initial",
    "G0439": "AWV Subsequent",
    "99495": "TCM 14-day",
    "99496": "TCM 7-day",
    "99484": "BHI",
}


def is_vbc_code(code: str | None) -> bool:
    """Return True if ``code`` is one of the tracked VBC codes."""
    return code in VBC_CODES
