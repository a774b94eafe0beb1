"""
Services package initialization.
"""
from creative_validator.services.analyzer import asset_analyzer
from creative_validator.services.grouping import detect_multi_file_groups
from creative_validator.services.html5_validator import validate_html5_banner
from creative_validator.services.matcher import find_matching_placements
from creative_validator.services.reporting import validate_collection
from creative_validator.services.validators import validate_file_for_placement

__all__ = [
    "asset_analyzer",
    "detect_multi_file_groups",
    "validate_html5_banner",
    "find_matching_placements",
    "validate_collection",
    "validate_file_for_placement"
]
