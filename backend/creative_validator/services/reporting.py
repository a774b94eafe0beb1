"""
Compatibility reporting - combine matcher, validator and group detector
results into the per-asset reports consumed by export and UI layers.
"""
from typing import Dict, List, Optional, Sequence
import structlog

from creative_validator.models import (
    AssetCompatibility, CollectionReport, CompatibleEntry, ErrorFile, FileAsset,
    IncompatibleEntry, Network, NetworkTierStats, Tier
)
from creative_validator.services.grouping import detect_multi_file_groups
from creative_validator.services.matcher import find_matching_placements
from creative_validator.services.registry import get_network_specs, list_networks
from creative_validator.services.validators import validate_file_for_placement

logger = structlog.get_logger()

NO_TIER = "NONE"


def network_tiers(network: Network) -> List[Optional[Tier]]:
    """Tiers a network is evaluated under; [None] for tier-less networks."""
    declared = set()
    for spec in get_network_specs(network).values():
        declared.update(spec.tiers or ())
    tiers = [t for t in Tier if t in declared]
    return tiers or [None]


def build_compatibility_report(asset: FileAsset) -> AssetCompatibility:
    """
    Sort every matched placement of an asset into compatible and incompatible.

    A placement is compatible when its validation outcome has no issues;
    warnings travel along with the entry.
    """
    report = AssetCompatibility(asset_name=asset.name)

    for network in list_networks():
        for tier in network_tiers(network):
            for match in find_matching_placements(asset, network, tier):
                outcome = validate_file_for_placement(asset, match.spec)

                if outcome.valid:
                    report.compatible.append(CompatibleEntry(
                        network=network,
                        tier=tier,
                        placement_key=match.placement_key,
                        format_display=match.format_display,
                        display_name=match.spec.display_name,
                        warnings=outcome.warnings
                    ))
                else:
                    report.incompatible.append(IncompatibleEntry(
                        network=network,
                        tier=tier,
                        placement_key=match.placement_key,
                        format_display=match.format_display,
                        reason=", ".join(outcome.issues),
                        warnings=outcome.warnings
                    ))

    logger.debug(
        "compatibility_report_built",
        asset=asset.name,
        compatible=len(report.compatible),
        incompatible=len(report.incompatible)
    )
    return report


def build_compatibility_reports(assets: Sequence[FileAsset]) -> List[AssetCompatibility]:
    return [build_compatibility_report(asset) for asset in assets]


def calculate_network_stats(
    reports: Sequence[AssetCompatibility]
) -> Dict[str, Dict[str, NetworkTierStats]]:
    """
    Aggregate reports per network and tier.

    eligible_assets counts files with at least one compatible placement in
    the network/tier; eligible_placements counts distinct placement keys.
    """
    stats: Dict[str, Dict[str, NetworkTierStats]] = {}
    placements: Dict[str, Dict[str, set]] = {}

    for network in list_networks():
        stats[network.value] = {}
        placements[network.value] = {}
        for tier in network_tiers(network):
            tier_key = tier.value if tier else NO_TIER
            stats[network.value][tier_key] = NetworkTierStats(total_assets=len(reports))
            placements[network.value][tier_key] = set()

    for report in reports:
        eligible = set()
        for entry in report.compatible:
            tier_key = entry.tier.value if entry.tier else NO_TIER
            placements[entry.network.value][tier_key].add(entry.placement_key)
            eligible.add((entry.network.value, tier_key))

        for network_name, tier_key in eligible:
            stats[network_name][tier_key].eligible_assets += 1

        for entry in report.incompatible:
            tier_key = entry.tier.value if entry.tier else NO_TIER
            tier_stats = stats[entry.network.value][tier_key]
            tier_stats.errors += 1
            tier_stats.error_files.append(ErrorFile(file=report.asset_name, reason=entry.reason))

    for network_name, tiers in placements.items():
        for tier_key, keys in tiers.items():
            stats[network_name][tier_key].eligible_placements = len(keys)

    return stats


def validate_collection(assets: Sequence[FileAsset]) -> CollectionReport:
    """Run the full compatibility check for an upload: reports, stats and groups."""
    assets = list(assets)
    groups = detect_multi_file_groups(assets)
    reports = build_compatibility_reports(assets)

    logger.info(
        "collection_validated",
        assets=len(assets),
        groups=len(groups),
        compatible_assets=sum(1 for r in reports if r.compatible)
    )
    return CollectionReport(
        reports=reports,
        groups=groups,
        network_stats=calculate_network_stats(reports)
    )
