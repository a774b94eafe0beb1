"""
Asset Analyzer - turn uploaded bytes into FileAsset descriptors.

Reads image dimensions and color space with Pillow, validates packaged HTML5
banners, and infers the semantic format tag and target network from file
and folder naming conventions.
"""
import io
import re
from typing import Dict, List, Optional, Tuple
from PIL import Image, UnidentifiedImageError
import structlog

from creative_validator.models import DetectedFormat, FileAsset, Network
from creative_validator.services.html5_validator import validate_html5_banner
from creative_validator.utils import (
    bytes_to_kb, format_dimensions, get_extension, normalize_image_format
)

logger = structlog.get_logger()

# Checked in order; the first keyword found in the name or folder wins
FORMAT_KEYWORDS: List[Tuple[str, DetectedFormat]] = [
    ("uncover", DetectedFormat.BRANDING_UNCOVER),
    ("scratcher", DetectedFormat.BRANDING_SCRATCHER),
    ("videopanel", DetectedFormat.BRANDING_VIDEOPANEL),
    ("branding-sklik", DetectedFormat.BRANDING_SKLIK),
    ("branding_sklik", DetectedFormat.BRANDING_SKLIK),
    ("spincube", DetectedFormat.SPINCUBE),
    ("spinner", DetectedFormat.SPINNER),
    ("interscroller", DetectedFormat.MOBILNI_INTERSCROLLER),
    ("inarticle", DetectedFormat.INARTICLE),
    ("kombi", DetectedFormat.KOMBI),
    ("branding", DetectedFormat.BRANDING),
]

EXCLUSIVE_DESKTOP_HALVES: Dict[str, DetectedFormat] = {
    "461x100": DetectedFormat.EXCLUSIVE_DESKTOP_TRIGGER,
    "1100x500": DetectedFormat.EXCLUSIVE_DESKTOP_BANNER,
}

# 'uac' is short enough to appear inside unrelated words
_UAC_PATTERN = re.compile(r"(?<![a-z])uac(?![a-z])")

# Upper-cased path fragments; HP variants all mean HP_EXCLUSIVE
NETWORK_PATH_KEYWORDS: List[Tuple[str, Network]] = [
    ("ADFORM", Network.ADFORM),
    ("SOS", Network.SOS),
    ("ONEGAR", Network.ONEGAR),
    ("SKLIK", Network.SKLIK),
    ("HP_EXCLUSIVE", Network.HP_EXCLUSIVE),
    ("HPEXCLUSIVE", Network.HP_EXCLUSIVE),
    ("HP EXCLUSIVE", Network.HP_EXCLUSIVE),
]


def detect_format_from_path(
    name: str,
    folder_path: str = "",
    is_html5: bool = False,
    dimensions: Optional[str] = None
) -> Optional[DetectedFormat]:
    """Infer the semantic format tag from naming conventions."""
    haystack = f"{folder_path}/{name}".lower()

    # Homepage exclusive halves are told apart by size; SOS has its own exclusive
    if (
        "exclusive" in haystack
        and dimensions in EXCLUSIVE_DESKTOP_HALVES
        and detect_network_from_path(folder_path) in (None, Network.HP_EXCLUSIVE)
    ):
        return EXCLUSIVE_DESKTOP_HALVES[dimensions]

    for keyword, detected in FORMAT_KEYWORDS:
        if keyword in haystack:
            return detected

    if _UAC_PATTERN.search(haystack):
        return DetectedFormat.UAC

    if is_html5:
        return DetectedFormat.HTML5_BANNER
    return None


def detect_network_from_path(folder_path: str) -> Optional[Network]:
    """Network named by the upload folder, if any."""
    if not folder_path:
        return None
    path_upper = folder_path.upper()
    for keyword, network in NETWORK_PATH_KEYWORDS:
        if keyword in path_upper:
            return network
    return None


class AssetAnalyzer:
    """Service for analyzing uploaded creative files."""

    def analyze_image(self, content: bytes, filename: str, folder_path: str = "") -> FileAsset:
        """
        Analyze a static image.

        Raises:
            ValueError: if Pillow cannot read the image
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                width, height = img.size
                mode = img.mode
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            logger.warning("image_unreadable", filename=filename, error=str(e))
            raise ValueError(f"Could not read image {filename}: {e}")

        color_space = "CMYK" if mode == "CMYK" else "RGB"
        dimensions = format_dimensions(width, height)

        asset = FileAsset(
            name=filename,
            dimensions=dimensions,
            size_kb=bytes_to_kb(len(content)),
            file_format=normalize_image_format(get_extension(filename)),
            color_space=color_space,
            color_space_valid=color_space != "CMYK",
            detected_format=detect_format_from_path(
                filename, folder_path, dimensions=dimensions
            ),
            folder_path=folder_path,
            assigned_network=detect_network_from_path(folder_path)
        )

        logger.info(
            "image_analyzed",
            filename=filename,
            dimensions=asset.dimensions,
            size_kb=asset.size_kb,
            color_space=color_space,
            detected_format=asset.detected_format
        )
        return asset

    def analyze_html5_archive(self, content: bytes, filename: str, folder_path: str = "") -> FileAsset:
        """Analyze a packaged HTML5 banner; dimensions come from its file name."""
        validation = validate_html5_banner(content, filename)

        return FileAsset(
            name=filename,
            dimensions=validation.dimensions,
            size_kb=bytes_to_kb(len(content)),
            file_format="html5",
            detected_format=detect_format_from_path(
                filename, folder_path, is_html5=True, dimensions=validation.dimensions
            ),
            folder_path=folder_path,
            assigned_network=detect_network_from_path(folder_path),
            html5_validation=validation
        )


# Singleton instance
asset_analyzer = AssetAnalyzer()
