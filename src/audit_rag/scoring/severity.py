"""Severity labels derived from the numeric nilai score."""

from __future__ import annotations

from audit_rag.config.constants import SEVERITY_THRESHOLDS


def severity_label(nilai: float) -> str:
    """Map nilai (bobot x kadar) to a label: >=16 Critical, >=11 High, >=6 Medium, else Low."""
    for threshold, label in SEVERITY_THRESHOLDS:
        if nilai >= threshold:
            return label
    return "Low"
