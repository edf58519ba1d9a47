"""Log collection settings keyed by data-centre name."""

from __future__ import annotations

from types import MappingProxyType

LCS_TALOS_MAP = MappingProxyType(
    {
        "vru1": "awsvru0-talos",
        "fr1": "awsde0m-talos",
        "or1": "awsusor1-talos",
        "sgp1": "awssgp1-talos",
        "sgp2": "awssgp1-talos",
        "c3": "cnbj1-talos",
        "lugu": "cnbj1-talos",
        "c4": "cnbj1-talos",
    }
)

LCS_ENABLED = MappingProxyType(
    {
        "vru1": True,
        "fr1": True,
        "c3": False,
        "lugu": False,
        "sgp1": True,
        "sgp2": True,
        "or1": True,
        "staging": False,
        "c4": False,
    }
)


def fix_category_by_idc(idc: str, category: str) -> str:
    """Prefix category with the cluster name of idc, when idc is known."""
    prefix = LCS_TALOS_MAP.get(idc)
    if prefix is None:
        return category
    return f"{prefix}#{category}"


def check_if_use_lcs_by_idc(idc: str) -> bool:
    """Return True when log collection is enabled for idc."""
    return LCS_ENABLED.get(idc, False)