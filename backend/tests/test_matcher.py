"""
Unit tests for the compatibility matcher.
"""
from creative_validator.models import DetectedFormat, Network, Tier, Html5ValidationResult
from creative_validator.services.matcher import (
    find_matching_placements,
    placement_key_matches_format,
    spec_accepts_asset
)
from creative_validator.services.registry import get_spec


def _pairs(matches):
    return {(m.network, m.placement_key) for m in matches}


class TestUntaggedAssets:
    """Tests for assets without a detected format tag."""

    def test_standard_banner_matches_every_offering_network(self, make_asset):
        """A plain 300x250 JPG matches every network offering that size and format."""
        asset = make_asset(name="promo.jpg", dimensions="300x250", size_kb=80, file_format="jpg")
        matches = find_matching_placements(asset)

        assert _pairs(matches) == {
            (Network.ADFORM, "sponzor-sluzby"),
            (Network.ONEGAR, "sponzor-sluzby"),
            (Network.SKLIK, "sponzor-sluzby"),
            (Network.GOOGLE_ADS, "inline-rectangle"),
        }
        assert all(m.size_valid for m in matches)

    def test_exact_dimension_match_only(self, make_asset):
        """301x250 is not 300x250; there is no near-match."""
        asset = make_asset(dimensions="301x250")
        assert find_matching_placements(asset) == []

    def test_disallowed_file_format(self, make_asset):
        asset = make_asset(name="promo.webp", file_format="webp")
        assert find_matching_placements(asset) == []

    def test_untagged_asset_skips_multi_file_placements(self, make_asset):
        """480x480 without the spincube tag never lands on the spincube placement."""
        asset = make_asset(name="square.png", dimensions="480x480")
        pairs = _pairs(find_matching_placements(asset))

        assert (Network.SOS, "spincube") not in pairs
        assert (Network.SOS, "exclusive") in pairs
        assert (Network.ADFORM, "mobilni-square-premium") in pairs

    def test_size_flag_uses_raw_limit(self, make_asset):
        """size_valid compares against the raw ceiling with no tolerance."""
        asset = make_asset(size_kb=155)
        by_network = {m.network: m for m in find_matching_placements(asset)}

        assert by_network[Network.ADFORM].size_valid is False
        assert by_network[Network.ADFORM].size_limit == 150
        assert by_network[Network.ONEGAR].size_valid is True


class TestTaggedAssets:
    """Tests for detected format exclusivity."""

    def test_spincube_is_sos_spincube_only(self, make_asset):
        asset = make_asset(
            name="spincube_1.png", dimensions="480x480",
            detected_format=DetectedFormat.SPINCUBE
        )
        matches = find_matching_placements(asset)

        assert _pairs(matches) == {(Network.SOS, "spincube")}
        assert matches[0].format_display == "spincube"
        assert matches[0].tier == (Tier.HIGH,)

    def test_branding_only_matches_branding_placement(self, make_asset):
        asset = make_asset(
            name="branding.jpg", dimensions="2560x1440", size_kb=500,
            file_format="jpg", detected_format=DetectedFormat.BRANDING
        )
        assert _pairs(find_matching_placements(asset)) == {(Network.SOS, "branding")}

    def test_uac_matches_any_uac_placement(self, make_asset):
        asset = make_asset(
            name="uac_landscape.jpg", dimensions="1200x628",
            file_format="jpg", detected_format=DetectedFormat.UAC
        )
        assert _pairs(find_matching_placements(asset)) == {(Network.GOOGLE_ADS, "uac-landscape")}

    def test_social_media_matches_nothing(self, make_asset):
        asset = make_asset(detected_format=DetectedFormat.SOCIAL_MEDIA)
        assert find_matching_placements(asset) == []

    def test_network_filter_intersects_allowlist(self, make_asset):
        asset = make_asset(
            name="spincube_1.png", dimensions="480x480",
            detected_format=DetectedFormat.SPINCUBE
        )
        assert find_matching_placements(asset, network=Network.ADFORM) == []


class TestTierFilter:
    """Tests for tier narrowing."""

    def test_low_tier_excludes_high_only_placements(self, make_asset):
        asset = make_asset(
            name="spincube_1.png", dimensions="480x480",
            detected_format=DetectedFormat.SPINCUBE
        )
        assert find_matching_placements(asset, tier=Tier.LOW) == []
        assert len(find_matching_placements(asset, tier="HIGH")) == 1

    def test_tierless_placements_ignore_tier(self, make_asset):
        asset = make_asset(name="half.png", dimensions="300x600")
        matches = find_matching_placements(asset, network=Network.GOOGLE_ADS, tier=Tier.LOW)
        assert _pairs(matches) == {(Network.GOOGLE_ADS, "half-page")}


class TestHtml5Assets:
    """Tests for packaged HTML5 banners."""

    def test_html5_banner_matches_placements_allowing_html5(self, make_asset):
        asset = make_asset(
            name="HTML5_970x210_leaderboard.zip", dimensions="970x210",
            file_format="html5", detected_format=DetectedFormat.HTML5_BANNER,
            html5_validation=Html5ValidationResult(is_packaged=True, dimensions="970x210")
        )
        assert _pairs(find_matching_placements(asset)) == {
            (Network.ADFORM, "leaderboard"),
            (Network.ONEGAR, "leaderboard"),
            (Network.SKLIK, "leaderboard"),
        }

    def test_html5_excluded_from_static_only_placements(self, make_asset):
        asset = make_asset(name="HTML5_728x90.zip", dimensions="728x90", file_format="html5")
        assert find_matching_placements(asset) == []


class TestPlacementFilters:
    """Tests for the per-placement predicates."""

    def test_placement_key_matches_format(self):
        assert placement_key_matches_format("uac-square", DetectedFormat.UAC)
        assert not placement_key_matches_format("square", DetectedFormat.UAC)
        assert placement_key_matches_format("spinner", DetectedFormat.SPINNER)
        assert not placement_key_matches_format("exclusive", DetectedFormat.SPINNER)

    def test_spec_accepts_asset_requires_tag_for_multi_file(self, make_asset):
        spec = get_spec(Network.SOS, "spinner")
        untagged = make_asset(name="side.png", dimensions="300x600")
        tagged = make_asset(name="spinner_1.png", dimensions="300x600",
                            detected_format=DetectedFormat.SPINNER)

        assert not spec_accepts_asset(untagged, "spinner", spec)
        assert spec_accepts_asset(tagged, "spinner", spec)
