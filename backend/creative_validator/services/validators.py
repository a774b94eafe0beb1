"""
Placement Validator - decide whether an asset satisfies one placement spec.

Every rule declares its severity once: HARD findings block the placement,
WARN findings are informational. File size is policy, not a technical
blocker, so it only ever produces warnings.
"""
from typing import List, Optional
import structlog

from creative_validator import messages
from creative_validator.models import (
    FileAsset, PlacementSpec, ValidationIssue, ValidationOutcome, IssueSeverity
)
from creative_validator.utils import exceeds_tolerance, tolerated_size_kb

logger = structlog.get_logger()


# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

def validate_dimensions(asset: FileAsset, spec: PlacementSpec) -> Optional[ValidationIssue]:
    """
    Dimensions must be literally listed by the placement.
    HARD FAIL otherwise.
    """
    if asset.dimensions in spec.dimensions:
        return None
    return ValidationIssue(
        severity=IssueSeverity.HARD,
        code="DIMENSION_MISMATCH",
        message=messages.DIMENSION_MISMATCH.format(
            actual=asset.dimensions,
            expected=" or ".join(spec.dimensions)
        )
    )


def validate_file_format(asset: FileAsset, spec: PlacementSpec) -> Optional[ValidationIssue]:
    """
    Static file format must be allowed by the placement.
    HARD FAIL otherwise.
    """
    if asset.file_format in spec.allowed_formats:
        return None
    return ValidationIssue(
        severity=IssueSeverity.HARD,
        code="FORMAT_NOT_ALLOWED",
        message=messages.FORMAT_NOT_ALLOWED.format(
            actual=asset.file_format,
            allowed=", ".join(spec.allowed_formats)
        )
    )


def validate_file_size(asset: FileAsset, spec: PlacementSpec) -> Optional[ValidationIssue]:
    """
    Size over the tolerated ceiling (limit x 1.05).
    WARNING only.
    """
    if not exceeds_tolerance(asset.size_kb, spec.max_size_kb):
        return None
    return ValidationIssue(
        severity=IssueSeverity.WARN,
        code="SIZE_OVER_LIMIT",
        message=messages.SIZE_OVER_LIMIT.format(
            size_kb=asset.size_kb,
            limit_kb=spec.max_size_kb,
            tolerated_kb=tolerated_size_kb(spec.max_size_kb)
        )
    )


def validate_color_space(asset: FileAsset) -> Optional[ValidationIssue]:
    """
    CMYK images are rejected.
    HARD FAIL if detected.
    """
    if asset.color_space_valid:
        return None
    return ValidationIssue(
        severity=IssueSeverity.HARD,
        code="CMYK_COLOR_SPACE",
        message=messages.CMYK_COLOR_SPACE
    )


def html5_findings_as_warnings(asset: FileAsset) -> List[ValidationIssue]:
    """
    Fold the structural findings of a packaged banner in as warnings.

    Packaged banners may ship with unresolved policy findings because the
    target networks are internal distribution systems.
    """
    result = asset.html5_validation
    if result is None:
        return []
    return [
        ValidationIssue(
            severity=IssueSeverity.WARN,
            code=f"HTML5_{finding.code}",
            message=finding.message
        )
        for finding in result.findings
    ]


# ============================================================================
# MAIN VALIDATION FUNCTION
# ============================================================================

def validate_file_for_placement(asset: FileAsset, spec: PlacementSpec) -> ValidationOutcome:
    """
    Validate an asset against one placement spec.

    Static assets: dimensions, file format and color space are hard rules.
    Packaged HTML5 banners: only dimensions are hard; structural findings
    are downgraded to warnings. Size is a warning for both.

    Returns:
        ValidationOutcome; valid when no HARD finding was produced
    """
    findings: List[ValidationIssue] = []

    dimension_issue = validate_dimensions(asset, spec)
    if dimension_issue:
        findings.append(dimension_issue)

    if not asset.is_html5:
        format_issue = validate_file_format(asset, spec)
        if format_issue:
            findings.append(format_issue)

    size_warning = validate_file_size(asset, spec)
    if size_warning:
        findings.append(size_warning)

    if asset.is_html5:
        findings.extend(html5_findings_as_warnings(asset))
    else:
        color_issue = validate_color_space(asset)
        if color_issue:
            findings.append(color_issue)

    outcome = ValidationOutcome(findings=findings)

    logger.debug(
        "placement_validated",
        asset=asset.name,
        placement=spec.display_name,
        valid=outcome.valid,
        hard_issues=len(outcome.issues),
        warn_issues=len(outcome.warnings)
    )
    return outcome
