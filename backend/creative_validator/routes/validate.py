"""
Validate Routes - run the compatibility engine on analyzed assets.
"""
from typing import List
from fastapi import APIRouter, HTTPException
import structlog

from creative_validator.models import (
    AssetsRequest, CollectionReport, MatchCandidate, MatchRequest,
    MultiFileGroup, PlacementValidateRequest, ValidationOutcome
)
from creative_validator.services.grouping import detect_multi_file_groups
from creative_validator.services.matcher import find_matching_placements
from creative_validator.services.registry import get_spec
from creative_validator.services.reporting import validate_collection
from creative_validator.services.validators import validate_file_for_placement

logger = structlog.get_logger()

router = APIRouter(prefix="/validate", tags=["Validate"])


@router.post("/match", response_model=List[MatchCandidate])
async def match_placements(request: MatchRequest):
    """
    Enumerate every placement an asset could occupy.

    Optional network and tier narrow the search. size_valid compares the
    file size with the raw limit; tolerance is applied by /validate/placement.
    """
    return find_matching_placements(request.asset, request.network, request.tier)


@router.post("/placement", response_model=ValidationOutcome)
async def validate_placement(request: PlacementValidateRequest):
    """
    Validate an asset against one placement.

    Returns:
    - valid: True when no blocking issue was found
    - issues: blocking problems (dimensions, format, color space)
    - warnings: informational problems (size, HTML5 policy)
    """
    try:
        spec = get_spec(request.network, request.placement_key)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))

    outcome = validate_file_for_placement(request.asset, spec)
    logger.info(
        "placement_checked",
        asset=request.asset.name,
        network=request.network.value,
        placement=request.placement_key,
        valid=outcome.valid
    )
    return outcome


@router.post("/compatibility", response_model=CollectionReport)
async def check_compatibility(request: AssetsRequest):
    """
    Full compatibility check of an upload.

    Every asset is matched against every network and tier, matches are
    validated, and multi-file groups are detected across the collection.
    """
    return validate_collection(request.assets)


@router.post("/groups", response_model=List[MultiFileGroup])
async def detect_groups(request: AssetsRequest):
    """
    Detect multi-file creative groups (uncover pairs, spincubes, spinners,
    exclusive trigger/banner pairs).
    """
    return detect_multi_file_groups(request.assets)
