"""
Unit tests for placement validation rules.
"""
from creative_validator.models import (
    DetectedFormat, Html5ValidationResult, IssueSeverity, Network, ValidationIssue
)
from creative_validator.services.registry import get_spec
from creative_validator.services.validators import (
    validate_file_for_placement,
    validate_dimensions,
    validate_file_format,
    validate_file_size,
    validate_color_space,
    html5_findings_as_warnings
)


def _html5_asset(make_asset, findings=(), dimensions="970x210", size_kb=100):
    return make_asset(
        name=f"HTML5_{dimensions}_leaderboard.zip",
        dimensions=dimensions,
        size_kb=size_kb,
        file_format="html5",
        detected_format=DetectedFormat.HTML5_BANNER,
        html5_validation=Html5ValidationResult(
            is_packaged=True, dimensions=dimensions, findings=list(findings)
        )
    )


class TestSizeValidation:
    """Tests for the size rule and its 5% tolerance."""

    def test_oversized_branding_is_a_warning(self, make_asset):
        """650KB against a 600KB limit stays valid with one warning."""
        asset = make_asset(
            name="branding.jpg", dimensions="2560x1440", size_kb=650,
            file_format="jpg", detected_format=DetectedFormat.BRANDING
        )
        outcome = validate_file_for_placement(asset, get_spec(Network.SOS, "branding"))

        assert outcome.valid is True
        assert outcome.issues == []
        assert len(outcome.warnings) == 1
        assert "650KB" in outcome.warnings[0]
        assert "630KB" in outcome.warnings[0]

    def test_within_tolerance_is_silent(self, make_asset):
        spec = get_spec(Network.SOS, "branding")
        asset = make_asset(dimensions="2560x1440", size_kb=630, file_format="jpg")
        assert validate_file_size(asset, spec) is None

    def test_just_over_tolerance_warns(self, make_asset):
        spec = get_spec(Network.SOS, "branding")
        asset = make_asset(dimensions="2560x1440", size_kb=631, file_format="jpg")
        issue = validate_file_size(asset, spec)
        assert issue is not None
        assert issue.severity == IssueSeverity.WARN
        assert issue.code == "SIZE_OVER_LIMIT"

    def test_oversized_html5_is_a_warning(self, make_asset):
        asset = _html5_asset(make_asset, size_kb=400)
        outcome = validate_file_for_placement(asset, get_spec(Network.ADFORM, "leaderboard"))
        assert outcome.valid is True
        assert len(outcome.warnings) == 1


class TestDimensionValidation:
    """Tests for the dimension rule."""

    def test_mismatch_is_hard(self, make_asset):
        spec = get_spec(Network.ADFORM, "sponzor-sluzby")
        issue = validate_dimensions(make_asset(dimensions="300x300"), spec)
        assert issue.severity == IssueSeverity.HARD
        assert issue.code == "DIMENSION_MISMATCH"
        assert "300x250" in issue.message

    def test_any_listed_dimension_passes(self, make_asset):
        spec = get_spec(Network.SOS, "inarticle")
        assert validate_dimensions(make_asset(dimensions="800x533"), spec) is None

    def test_html5_dimension_mismatch_blocks(self, make_asset):
        asset = _html5_asset(make_asset, dimensions="728x90")
        outcome = validate_file_for_placement(asset, get_spec(Network.ADFORM, "leaderboard"))
        assert outcome.valid is False
        assert len(outcome.issues) == 1


class TestFormatAndColorValidation:
    """Tests for static file format and color space."""

    def test_format_not_allowed_is_hard(self, make_asset):
        spec = get_spec(Network.SOS, "branding-scratcher")
        asset = make_asset(dimensions="2560x1440", file_format="png")
        issue = validate_file_format(asset, spec)
        assert issue.severity == IssueSeverity.HARD
        assert issue.code == "FORMAT_NOT_ALLOWED"

        outcome = validate_file_for_placement(asset, spec)
        assert outcome.valid is False

    def test_cmyk_is_hard(self, make_asset):
        asset = make_asset(color_space="CMYK", color_space_valid=False)
        issue = validate_color_space(asset)
        assert issue.severity == IssueSeverity.HARD

        outcome = validate_file_for_placement(asset, get_spec(Network.ADFORM, "sponzor-sluzby"))
        assert outcome.valid is False
        assert outcome.issues == ["CMYK color space detected (RGB required)"]

    def test_rgb_passes(self, make_asset):
        assert validate_color_space(make_asset()) is None

    def test_clean_static_asset(self, make_asset):
        outcome = validate_file_for_placement(
            make_asset(size_kb=80, file_format="jpg"),
            get_spec(Network.ADFORM, "sponzor-sluzby")
        )
        assert outcome.valid is True
        assert outcome.findings == []


class TestHtml5Folding:
    """Tests for folding HTML5 structural findings into placement results."""

    def test_missing_clickthru_surfaces_as_warning(self, make_asset):
        """A structural issue of a packaged banner never blocks the placement."""
        finding = ValidationIssue(
            severity=IssueSeverity.HARD,
            code="MISSING_CLICKTHRU",
            message="Missing __CLICKTHRU__ variable for the clickthrough URL"
        )
        asset = _html5_asset(make_asset, findings=[finding])
        outcome = validate_file_for_placement(asset, get_spec(Network.ADFORM, "leaderboard"))

        assert outcome.valid is True
        assert outcome.issues == []
        assert outcome.warnings == [finding.message]
        assert outcome.findings[0].code == "HTML5_MISSING_CLICKTHRU"

    def test_html5_warnings_fold_too(self, make_asset):
        finding = ValidationIssue(
            severity=IssueSeverity.WARN, code="NAME_CONVENTION", message="naming"
        )
        folded = html5_findings_as_warnings(_html5_asset(make_asset, findings=[finding]))
        assert [f.severity for f in folded] == [IssueSeverity.WARN]

    def test_format_rule_skipped_for_html5(self, make_asset):
        """Packaged banners are not checked against the static format list."""
        asset = _html5_asset(make_asset)
        outcome = validate_file_for_placement(asset, get_spec(Network.ADFORM, "leaderboard"))
        assert outcome.valid is True
        assert outcome.findings == []

    def test_static_asset_without_html5_result(self, make_asset):
        assert html5_findings_as_warnings(make_asset()) == []
