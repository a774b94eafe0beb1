"""
Compatibility Matcher - enumerate the placements an asset could occupy.

The matcher is the cheap first pass: it filters the registry by network,
detected format, tier, dimensions and file format. The size flag it emits
uses the raw ceiling; tolerance is applied only by the placement validator.
"""
from typing import List, Optional, Union
import structlog

from creative_validator.models import (
    FileAsset, MatchCandidate, Network, PlacementSpec, Tier, DetectedFormat
)
from creative_validator.services.registry import (
    allowed_networks_for_format, get_format_display_name, get_network_specs,
    list_networks
)

logger = structlog.get_logger()


def _restricts_placement_key(asset: FileAsset) -> bool:
    """Tagged assets only match their own placement, except generic HTML5 banners."""
    return (
        asset.detected_format is not None
        and asset.detected_format != DetectedFormat.HTML5_BANNER
    )


def placement_key_matches_format(placement_key: str, detected_format: DetectedFormat) -> bool:
    """Check whether a placement key belongs to a detected format."""
    if detected_format == DetectedFormat.UAC:
        return placement_key.startswith("uac-")
    return placement_key == detected_format.value


def spec_accepts_asset(
    asset: FileAsset,
    placement_key: str,
    spec: PlacementSpec,
    tier: Optional[Tier] = None
) -> bool:
    """Apply every per-placement filter of the matcher to one spec."""
    if _restricts_placement_key(asset) and not placement_key_matches_format(
        placement_key, asset.detected_format
    ):
        return False

    if tier and spec.tiers and tier not in spec.tiers:
        return False

    if asset.dimensions not in spec.dimensions:
        return False

    # Composite placements only take files named for them
    if spec.multi_file and (
        asset.detected_format is None or asset.detected_format.value != placement_key
    ):
        return False

    if asset.is_html5:
        return "html5" in spec.allowed_formats

    return asset.file_format in spec.allowed_formats


def find_matching_placements(
    asset: FileAsset,
    network: Optional[Union[Network, str]] = None,
    tier: Optional[Union[Tier, str]] = None
) -> List[MatchCandidate]:
    """
    Find every (network, placement) pair an asset could occupy.

    Args:
        asset: Analyzed file
        network: Restrict the search to one network (all networks if None)
        tier: Restrict to placements offered in this tier

    Returns:
        Candidates in registry order
    """
    search_networks = [Network(network)] if network else list(list_networks())
    tier = Tier(tier) if tier else None

    if _restricts_placement_key(asset):
        allowed = allowed_networks_for_format(asset.detected_format)
        search_networks = [n for n in search_networks if n in allowed]

    matches: List[MatchCandidate] = []
    for network_name in search_networks:
        for placement_key, spec in get_network_specs(network_name).items():
            if not spec_accepts_asset(asset, placement_key, spec, tier):
                continue

            matches.append(MatchCandidate(
                network=network_name,
                tier=spec.tiers,
                placement_key=placement_key,
                spec=spec,
                format_display=get_format_display_name(asset.dimensions, placement_key),
                size_valid=asset.size_kb <= spec.max_size_kb,
                size_limit=spec.max_size_kb,
                file_size_kb=asset.size_kb
            ))

    logger.debug(
        "placements_matched",
        asset=asset.name,
        network=network,
        tier=tier,
        matches=len(matches)
    )
    return matches
