"""
Multi-File Group Detector - assemble composite creatives from an upload.

Grouping is a two-stage pipeline: candidates are first bucketed by
(family, folder) and each bucket is then chunked into groups. Members of a
group always share a folder; input order decides chunk membership.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple
import structlog

from creative_validator import messages
from creative_validator.models import FileAsset, MultiFileGroup, Network

logger = structlog.get_logger()

ROOT_FOLDER = "root"


@dataclass(frozen=True)
class GroupFamily:
    """A composite format recognised by dimension and naming keyword."""
    format_tag: str
    network: Network
    dimensions: str
    keyword: str
    required_count: int
    roles: Tuple[str, ...]
    # Smaller set that still counts as complete, e.g. 2 spinner sides used twice
    reuse_count: Optional[int] = None
    reuse_roles: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PairFamily:
    """A composite made of two dimensionally distinct halves."""
    format_tag: str
    network: Network
    first_dimensions: str
    second_dimensions: str
    roles: Tuple[str, ...]


KEYWORD_FAMILIES = [
    GroupFamily(
        format_tag="branding-uncover",
        network=Network.SOS,
        dimensions="2560x1440",
        keyword="uncover",
        required_count=2,
        roles=("cover", "uncover"),
    ),
    GroupFamily(
        format_tag="spincube",
        network=Network.SOS,
        dimensions="480x480",
        keyword="spincube",
        required_count=4,
        roles=("banner", "banner", "banner", "banner"),
    ),
    GroupFamily(
        format_tag="spinner",
        network=Network.SOS,
        dimensions="300x600",
        keyword="spinner",
        required_count=4,
        roles=("side1", "side2", "side3", "side4"),
        reuse_count=2,
        reuse_roles=("side1", "side2"),
    ),
]

TRIGGER_BANNER_FAMILY = PairFamily(
    format_tag="exclusive-desktop",
    network=Network.HP_EXCLUSIVE,
    first_dimensions="461x100",
    second_dimensions="1100x500",
    roles=("trigger", "banner"),
)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def folder_key(asset: FileAsset) -> str:
    """Partition key for an asset's origin folder."""
    return asset.folder_path or ROOT_FOLDER


def group_by_folder_path(
    assets: Iterable[FileAsset],
    filter_fn: Optional[Callable[[FileAsset], bool]] = None
) -> Dict[str, List[FileAsset]]:
    """Bucket assets by folder, keeping first-seen folder order and input order."""
    grouped: Dict[str, List[FileAsset]] = {}
    for asset in assets:
        if filter_fn and not filter_fn(asset):
            continue
        grouped.setdefault(folder_key(asset), []).append(asset)
    return grouped


def name_mentions(asset: FileAsset, keyword: str) -> bool:
    """Case-insensitive keyword check on the file name or folder path."""
    keyword = keyword.lower()
    return keyword in asset.name.lower() or keyword in asset.folder_path.lower()


def chunk(items: Sequence[FileAsset], size: int) -> List[Sequence[FileAsset]]:
    """Split items into consecutive chunks of at most size elements."""
    return [items[i:i + size] for i in range(0, len(items), size)]


# ============================================================================
# FAMILY DETECTION
# ============================================================================

def _keyword_candidates(assets: Sequence[FileAsset], family: GroupFamily) -> Dict[str, List[FileAsset]]:
    """Stage one: static files of the family's size that carry its keyword."""
    return group_by_folder_path(
        assets,
        lambda a: (
            a.dimensions == family.dimensions
            and not a.is_html5
            and name_mentions(a, family.keyword)
        )
    )


def _chunk_family(family: GroupFamily, folder: str, members: Sequence[FileAsset]) -> List[MultiFileGroup]:
    """Stage two: cut one folder bucket into groups."""
    groups = []
    for part in chunk(members, family.required_count):
        if len(part) == family.required_count:
            groups.append(MultiFileGroup(
                format_tag=family.format_tag,
                network=family.network,
                members=tuple(part),
                complete=True,
                required_count=family.required_count,
                roles=family.roles,
                folder_path=folder
            ))
        elif family.reuse_count and len(part) == family.reuse_count:
            groups.append(MultiFileGroup(
                format_tag=family.format_tag,
                network=family.network,
                members=tuple(part),
                complete=True,
                required_count=family.reuse_count,
                roles=family.reuse_roles,
                folder_path=folder,
                notes=messages.SPINNER_REUSED_PAIR
            ))
        else:
            groups.append(MultiFileGroup(
                format_tag=family.format_tag,
                network=family.network,
                members=tuple(part),
                complete=False,
                required_count=family.required_count,
                roles=family.roles,
                folder_path=folder
            ))
    return groups


def detect_keyword_family(assets: Sequence[FileAsset], family: GroupFamily) -> List[MultiFileGroup]:
    """Detect all groups of one keyword-based family."""
    groups = []
    for folder, members in _keyword_candidates(assets, family).items():
        groups.extend(_chunk_family(family, folder, members))
    return groups


def detect_pair_family(assets: Sequence[FileAsset], family: PairFamily) -> List[MultiFileGroup]:
    """
    Pair the i-th first half with the i-th second half inside each folder.

    Halves are identified by dimensions alone. Leftovers become incomplete
    single-member groups.
    """
    firsts = group_by_folder_path(assets, lambda a: a.dimensions == family.first_dimensions)
    seconds = group_by_folder_path(assets, lambda a: a.dimensions == family.second_dimensions)

    folders = list(firsts)
    folders.extend(f for f in seconds if f not in firsts)

    groups = []
    for folder in folders:
        folder_firsts = firsts.get(folder, [])
        folder_seconds = seconds.get(folder, [])
        pair_count = min(len(folder_firsts), len(folder_seconds))

        for first, second in zip(folder_firsts, folder_seconds):
            groups.append(MultiFileGroup(
                format_tag=family.format_tag,
                network=family.network,
                members=(first, second),
                complete=True,
                required_count=2,
                roles=family.roles,
                folder_path=folder
            ))

        for leftover in folder_firsts[pair_count:] + folder_seconds[pair_count:]:
            groups.append(MultiFileGroup(
                format_tag=family.format_tag,
                network=family.network,
                members=(leftover,),
                complete=False,
                required_count=2,
                roles=family.roles,
                folder_path=folder
            ))
    return groups


# ============================================================================
# MAIN DETECTION FUNCTION
# ============================================================================

def detect_multi_file_groups(assets: Sequence[FileAsset]) -> List[MultiFileGroup]:
    """
    Detect composite creative groups in a whole asset collection.

    Pure function of the collection and its order: calling it twice on the
    same list gives the same groups.
    """
    assets = list(assets)
    groups: List[MultiFileGroup] = []

    for family in KEYWORD_FAMILIES:
        groups.extend(detect_keyword_family(assets, family))
    groups.extend(detect_pair_family(assets, TRIGGER_BANNER_FAMILY))

    logger.info(
        "multi_file_groups_detected",
        assets=len(assets),
        groups=len(groups),
        complete=sum(1 for g in groups if g.complete)
    )
    return groups
