"""
Specification Registry - placement specifications per ad network.

The registry is built once at import time and exposed only through read-only
mappings. Nothing in the engine mutates it at run time.
"""
from types import MappingProxyType
from typing import Dict, Any, Mapping, Optional, Tuple, Union
import structlog

from creative_validator.models import (
    Network, Tier, DetectedFormat, PlacementSpec, MultiFileSpec
)

logger = structlog.get_logger()

REGISTRY_VERSION = "2025.11"

HIGH_LOW = ["HIGH", "LOW"]
HIGH_ONLY = ["HIGH"]
STANDARD_FORMATS = ["jpg", "png", "gif", "html5"]
STATIC_FORMATS = ["jpg", "png", "gif"]
MODERN_STATIC_FORMATS = ["jpg", "png", "gif", "webp", "avif"]


# ============================================================================
# PLACEMENT SPECIFICATIONS
# ============================================================================

_RAW_SPECS: Dict[str, Dict[str, Dict[str, Any]]] = {
    # HIGH & LOW tiers
    "ADFORM": {
        "sponzor-sluzby": {
            "name": "Sponzor služby", "dimensions": ["300x250"], "max_size": 150,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "mobilni-square": {
            "name": "Mobilní square", "dimensions": ["300x300"], "max_size": 150,
            "formats": STANDARD_FORMATS, "device": "Mobil", "tier": HIGH_LOW,
        },
        "skyscraper": {
            "name": "Skyscraper", "dimensions": ["300x600"], "max_size": 150,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "wallpaper": {
            "name": "Wallpaper / Produktová plachta", "dimensions": ["480x300"], "max_size": 150,
            "formats": STANDARD_FORMATS, "device": "Desktop/Mobil", "tier": HIGH_LOW,
        },
        "mobilni-square-premium": {
            "name": "Mobilní square premium / Mobilní square", "dimensions": ["480x480"],
            "max_size": 150, "formats": STANDARD_FORMATS, "device": "Mobil", "tier": HIGH_LOW,
        },
        "leaderboard": {
            "name": "Leaderboard", "dimensions": ["970x210"], "max_size": 150,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "rectangle": {
            "name": "Rectangle", "dimensions": ["970x310"], "max_size": 150,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
    },
    # HIGH tier only; rich media and in-article formats, no standard banners
    "SOS": {
        "branding": {
            "name": "Branding", "dimensions": ["2560x1440"], "max_size": 600,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_ONLY,
            "notes": "Main message in the upper 1366x720 area. Video panel option: MP4, 720p, max 100MB, 60s.",
        },
        "branding-sklik": {
            "name": "Branding Sklik", "dimensions": ["2000x1400"], "max_size": 500,
            "formats": MODERN_STATIC_FORMATS, "device": "Desktop", "tier": HIGH_ONLY,
            "notes": "Safe area 1366x720 at the top, 100px margin. Image cannot be transparent.",
        },
        "branding-scratcher": {
            "name": "Branding Scratcher", "dimensions": ["2560x1440"], "max_size": 600,
            "formats": ["jpg"], "device": "Desktop", "tier": HIGH_ONLY,
        },
        "branding-uncover": {
            "name": "Branding Uncover", "dimensions": ["2560x1440"], "max_size": 600,
            "formats": STATIC_FORMATS, "device": "Desktop", "tier": HIGH_ONLY,
            "multi_file": {"count": 2, "roles": ["cover", "uncover"]},
            "notes": "Two creatives: cover and uncover. Non-animated GIF only.",
        },
        "branding-videopanel": {
            "name": "Branding Videopanel", "dimensions": ["2560x1440"], "max_size": 600,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_ONLY,
        },
        "inarticle": {
            "name": "Inarticle",
            "dimensions": ["640x480", "338x190", "400x300", "800x533", "1200x628", "1200x1200"],
            "max_size": 500, "formats": ["jpg", "png"], "device": "Desktop/Mobil", "tier": HIGH_ONLY,
        },
        "nativni-inzerat": {
            "name": "Nativní inzerát (In-article)",
            "dimensions": ["640x480", "338x190", "400x300", "800x533"],
            "max_size": 500, "formats": ["jpg", "png"], "device": "Desktop/Mobil", "tier": HIGH_ONLY,
        },
        "spincube": {
            "name": "Spincube", "dimensions": ["480x480"], "max_size": 250,
            "formats": STATIC_FORMATS, "device": "Mobil", "tier": HIGH_ONLY,
            "multi_file": {"count": 4, "roles": ["banner", "banner", "banner", "banner"]},
            "notes": "4x 480x480 banners required. Non-animated GIF only.",
        },
        "mobilni-interscroller": {
            "name": "Mobilní Interscroller", "dimensions": ["720x1280"], "max_size": 250,
            "formats": MODERN_STATIC_FORMATS, "device": "Mobil", "tier": HIGH_ONLY,
            "notes": "Safe zone 700x920 for the main message.",
        },
        "spinner": {
            "name": "Spinner (Skyscraper)", "dimensions": ["300x600"], "max_size": 250,
            "formats": STATIC_FORMATS, "device": "Desktop", "tier": HIGH_ONLY,
            "multi_file": {"count": 4, "roles": ["side1", "side2", "side3", "side4"]},
            "notes": "4x 300x600 banners required (or 2 used twice).",
        },
        "exclusive": {
            "name": "Exclusive", "dimensions": ["480x480", "480x300", "461x100", "1100x500"],
            "max_size": 300, "formats": STATIC_FORMATS, "device": "Desktop/Mobil", "tier": HIGH_ONLY,
        },
    },
    # HIGH & LOW tiers
    "ONEGAR": {
        "wallpaper": {
            "name": "Wallpaper", "dimensions": ["480x300"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop/Mobil", "tier": HIGH_LOW,
        },
        "leaderboard": {
            "name": "Leaderboard", "dimensions": ["970x210"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "sponzor-sluzby": {
            "name": "Sponzor služby", "dimensions": ["300x250"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "rectangle": {
            "name": "Rectangle", "dimensions": ["970x310"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "skyscraper": {
            "name": "Skyscraper", "dimensions": ["300x600"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "mobilni-square": {
            "name": "Mobilní square", "dimensions": ["300x300", "480x480"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Mobil", "tier": HIGH_LOW,
        },
        "kombi": {
            "name": "Nativní inzerát / Kombi",
            "dimensions": ["1200x628", "1200x1200", "600x314", "300x300"],
            "max_size": 1024, "formats": MODERN_STATIC_FORMATS, "device": "Desktop/Mobil",
            "tier": HIGH_LOW, "notes": "Banner without text. Recommended 1200x628 / 1200x1200.",
        },
    },
    # HIGH & LOW tiers
    "SKLIK": {
        "wallpaper": {
            "name": "Wallpaper", "dimensions": ["480x300"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop/Mobil", "tier": HIGH_LOW,
        },
        "leaderboard": {
            "name": "Leaderboard", "dimensions": ["970x210"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "sponzor-sluzby": {
            "name": "Sponzor služby", "dimensions": ["300x250"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "rectangle": {
            "name": "Rectangle", "dimensions": ["970x310"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "skyscraper": {
            "name": "Skyscraper", "dimensions": ["300x600"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "mobilni-square": {
            "name": "Mobilní square", "dimensions": ["300x300", "480x480"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Mobil", "tier": HIGH_LOW,
        },
        "kombi": {
            "name": "Nativní inzerát / Kombi",
            "dimensions": ["1200x628", "1200x1200", "600x314", "300x300"],
            "max_size": 1024, "formats": MODERN_STATIC_FORMATS, "device": "Desktop/Mobil",
            "tier": HIGH_LOW, "notes": "Banner without text. Max 4000px width/height.",
        },
        "leaderboard-middle": {
            "name": "Leaderboard middle", "dimensions": ["728x90"], "max_size": 250,
            "formats": STATIC_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "mobilni-leaderboard": {
            "name": "Mobilní leaderboard", "dimensions": ["320x100"], "max_size": 250,
            "formats": STATIC_FORMATS, "device": "Mobil", "tier": HIGH_LOW,
        },
        "skyscraper-sticky": {
            "name": "Skyscraper sticky", "dimensions": ["160x600", "300x600"], "max_size": 250,
            "formats": STANDARD_FORMATS, "device": "Desktop", "tier": HIGH_LOW,
        },
        "mobilni-interscroller": {
            "name": "Mobilní Interscroller", "dimensions": ["720x1280"], "max_size": 250,
            "formats": MODERN_STATIC_FORMATS, "device": "Mobil", "tier": HIGH_LOW,
            "notes": "Safe zone 700x920 for the main message.",
        },
    },
    # No tiers
    "HP_EXCLUSIVE": {
        "exclusive-desktop-trigger": {
            "name": "Exclusive Desktop - Trigger (varianta A)", "dimensions": ["461x100"],
            "max_size": 200, "formats": STATIC_FORMATS, "device": "Desktop",
            "multi_file": {"count": 2, "roles": ["trigger"], "paired_with": "exclusive-desktop-banner"},
        },
        "exclusive-desktop-banner": {
            "name": "Exclusive Desktop - Banner (varianta A)", "dimensions": ["1100x500"],
            "max_size": 300, "formats": STANDARD_FORMATS, "device": "Desktop",
            "multi_file": {"count": 2, "roles": ["banner"], "paired_with": "exclusive-desktop-trigger"},
            "notes": "Image max 300KB, HTML5 max 1MB.",
        },
        "exclusive-mobile-wallpaper": {
            "name": "Exclusive wallpaper (varianta A)", "dimensions": ["480x300"],
            "max_size": 200, "formats": STANDARD_FORMATS, "device": "Mobil",
        },
        "exclusive-mobile-square": {
            "name": "Exclusive mobilní square premium (varianta B)", "dimensions": ["480x480"],
            "max_size": 200, "formats": STANDARD_FORMATS, "device": "Mobil",
        },
        "exclusive-app-wallpaper": {
            "name": "Exclusive wallpaper (varianta A)", "dimensions": ["480x300"],
            "max_size": 100, "formats": STATIC_FORMATS, "device": "Aplikace",
        },
        "exclusive-app-square": {
            "name": "Exclusive mobilní square premium (varianta B)", "dimensions": ["480x480"],
            "max_size": 100, "formats": STATIC_FORMATS, "device": "Aplikace",
        },
    },
    # No tiers, validation only
    "GOOGLE_ADS": {
        "square-small": {"name": "Small Square", "dimensions": ["200x200"], "max_size": 150,
                         "formats": STATIC_FORMATS, "device": "Desktop/Mobil"},
        "square": {"name": "Square", "dimensions": ["250x250"], "max_size": 150,
                   "formats": STATIC_FORMATS, "device": "Desktop/Mobil"},
        "banner": {"name": "Banner", "dimensions": ["468x60"], "max_size": 150,
                   "formats": STATIC_FORMATS, "device": "Desktop/Mobil"},
        "leaderboard": {"name": "Leaderboard", "dimensions": ["728x90"], "max_size": 150,
                        "formats": STATIC_FORMATS, "device": "Desktop/Mobil"},
        "inline-rectangle": {"name": "Inline Rectangle", "dimensions": ["300x250"], "max_size": 150,
                             "formats": STATIC_FORMATS, "device": "Desktop/Mobil"},
        "large-rectangle": {"name": "Large Rectangle", "dimensions": ["336x280"], "max_size": 150,
                            "formats": STATIC_FORMATS, "device": "Desktop/Mobil"},
        "skyscraper": {"name": "Skyscraper", "dimensions": ["120x600"], "max_size": 150,
                       "formats": STATIC_FORMATS, "device": "Desktop"},
        "wide-skyscraper": {"name": "Wide Skyscraper", "dimensions": ["160x600"], "max_size": 150,
                            "formats": STATIC_FORMATS, "device": "Desktop"},
        "half-page": {"name": "Half Page", "dimensions": ["300x600"], "max_size": 150,
                      "formats": STATIC_FORMATS, "device": "Desktop"},
        "large-leaderboard": {"name": "Large Leaderboard", "dimensions": ["970x250"], "max_size": 150,
                              "formats": STATIC_FORMATS, "device": "Desktop"},
        "mobile-banner": {"name": "Mobile Banner", "dimensions": ["320x50"], "max_size": 150,
                          "formats": STATIC_FORMATS, "device": "Mobil"},
        "mobile-leaderboard": {"name": "Mobile Leaderboard", "dimensions": ["320x100"], "max_size": 150,
                               "formats": STATIC_FORMATS, "device": "Mobil"},
        # Universal App Campaigns, 5 MB
        "uac-square": {"name": "UAC Square (1:1)", "dimensions": ["1200x1200"], "max_size": 5120,
                       "formats": ["jpg", "png"], "device": "Desktop/Mobil"},
        "uac-portrait": {"name": "UAC Portrait (4:5)", "dimensions": ["1200x1500"], "max_size": 5120,
                         "formats": ["jpg", "png"], "device": "Desktop/Mobil"},
        "uac-landscape": {"name": "UAC Landscape (1.91:1)", "dimensions": ["1200x628"], "max_size": 5120,
                          "formats": ["jpg", "png"], "device": "Desktop/Mobil"},
    },
}


# ============================================================================
# FORMAT -> NETWORK ALLOWLIST
# ============================================================================

STANDARD_BANNER_NETWORKS = (Network.ADFORM, Network.ONEGAR, Network.SKLIK)

# Networks used when a tag has no entry of its own
DEFAULT_VALIDATION_NETWORKS = (
    Network.ADFORM, Network.SOS, Network.ONEGAR, Network.SKLIK, Network.GOOGLE_ADS
)

_FORMAT_NETWORKS: Dict[DetectedFormat, Tuple[Network, ...]] = {
    # SOS-exclusive rich media
    DetectedFormat.INARTICLE: (Network.SOS,),
    DetectedFormat.SPINCUBE: (Network.SOS,),
    DetectedFormat.EXCLUSIVE: (Network.SOS,),
    DetectedFormat.BRANDING_SCRATCHER: (Network.SOS,),
    DetectedFormat.BRANDING_UNCOVER: (Network.SOS,),
    DetectedFormat.BRANDING_VIDEOPANEL: (Network.SOS,),
    DetectedFormat.SPINNER: (Network.SOS,),
    DetectedFormat.NATIVNI_INZERAT: (Network.SOS,),
    DetectedFormat.BRANDING: (Network.SOS, Network.SKLIK),
    DetectedFormat.BRANDING_SKLIK: (Network.SKLIK,),
    DetectedFormat.INTERSCROLLER: (Network.SOS, Network.SKLIK),
    DetectedFormat.MOBILNI_INTERSCROLLER: (Network.SOS, Network.SKLIK),
    DetectedFormat.KOMBI: (Network.ONEGAR, Network.SKLIK),
    # Standard banners never go to SOS
    DetectedFormat.SPONZOR_SLUZBY: STANDARD_BANNER_NETWORKS,
    DetectedFormat.MOBILNI_SQUARE: STANDARD_BANNER_NETWORKS,
    DetectedFormat.MOBILNI_SQUARE_PREMIUM: STANDARD_BANNER_NETWORKS,
    DetectedFormat.SKYSCRAPER: STANDARD_BANNER_NETWORKS,
    DetectedFormat.SKYSCRAPER_STICKY: (Network.SKLIK,),
    DetectedFormat.WALLPAPER: STANDARD_BANNER_NETWORKS,
    DetectedFormat.LEADERBOARD: STANDARD_BANNER_NETWORKS,
    DetectedFormat.LEADERBOARD_MIDDLE: (Network.SKLIK,),
    DetectedFormat.MOBILNI_LEADERBOARD: (Network.SKLIK,),
    DetectedFormat.RECTANGLE: STANDARD_BANNER_NETWORKS,
    DetectedFormat.HTML5_BANNER: STANDARD_BANNER_NETWORKS,
    DetectedFormat.EXCLUSIVE_DESKTOP_TRIGGER: (Network.HP_EXCLUSIVE,),
    DetectedFormat.EXCLUSIVE_DESKTOP_BANNER: (Network.HP_EXCLUSIVE,),
    DetectedFormat.EXCLUSIVE_MOBILE_WALLPAPER: (Network.HP_EXCLUSIVE,),
    DetectedFormat.EXCLUSIVE_MOBILE_SQUARE: (Network.HP_EXCLUSIVE,),
    DetectedFormat.EXCLUSIVE_APP_WALLPAPER: (Network.HP_EXCLUSIVE,),
    DetectedFormat.EXCLUSIVE_APP_SQUARE: (Network.HP_EXCLUSIVE,),
    DetectedFormat.UAC: (Network.GOOGLE_ADS,),
    DetectedFormat.UAC_SQUARE: (Network.GOOGLE_ADS,),
    DetectedFormat.UAC_PORTRAIT: (Network.GOOGLE_ADS,),
    DetectedFormat.UAC_LANDSCAPE: (Network.GOOGLE_ADS,),
    # Social media is never validated against ad networks
    DetectedFormat.SOCIAL_MEDIA: (),
}


def _build_spec(raw: Dict[str, Any]) -> PlacementSpec:
    multi_file = None
    if "multi_file" in raw:
        multi_file = MultiFileSpec(
            required_count=raw["multi_file"]["count"],
            roles=tuple(raw["multi_file"]["roles"]),
            paired_with=raw["multi_file"].get("paired_with"),
        )
    tiers = raw.get("tier")
    return PlacementSpec(
        display_name=raw["name"],
        dimensions=tuple(raw["dimensions"]),
        max_size_kb=raw["max_size"],
        allowed_formats=tuple(raw["formats"]),
        tiers=tuple(Tier(t) for t in tiers) if tiers else None,
        multi_file=multi_file,
        device=raw.get("device"),
        notes=raw.get("notes"),
    )


def _build_registry(
    raw_specs: Dict[str, Dict[str, Dict[str, Any]]]
) -> Mapping[Network, Mapping[str, PlacementSpec]]:
    registry = {}
    for network_name, placements in raw_specs.items():
        registry[Network(network_name)] = MappingProxyType(
            {key: _build_spec(raw) for key, raw in placements.items()}
        )
    return MappingProxyType(registry)


CREATIVE_SPECS = _build_registry(_RAW_SPECS)
FORMAT_NETWORKS = MappingProxyType(_FORMAT_NETWORKS)

logger.debug(
    "registry_loaded",
    version=REGISTRY_VERSION,
    networks=len(CREATIVE_SPECS),
    placements=sum(len(p) for p in CREATIVE_SPECS.values())
)


# ============================================================================
# READ-ONLY ACCESSORS
# ============================================================================

def get_registry() -> Mapping[Network, Mapping[str, PlacementSpec]]:
    """Return the whole registry as a read-only mapping."""
    return CREATIVE_SPECS


def list_networks() -> Tuple[Network, ...]:
    """Networks in registry order."""
    return tuple(CREATIVE_SPECS.keys())


def get_network_specs(network: Union[Network, str]) -> Mapping[str, PlacementSpec]:
    """Return the placements of one network."""
    try:
        return CREATIVE_SPECS[Network(network)]
    except ValueError:
        raise ValueError(f"Unknown network: {network}")


def get_spec(network: Union[Network, str], placement_key: str) -> PlacementSpec:
    """Return one placement spec. Raises KeyError for unknown placements."""
    specs = get_network_specs(network)
    if placement_key not in specs:
        raise KeyError(f"Unknown placement '{placement_key}' for network {network}")
    return specs[placement_key]


def allowed_networks_for_format(
    detected_format: Optional[Union[DetectedFormat, str]]
) -> Tuple[Network, ...]:
    """
    Networks permitted to carry a detected format.

    No tag means every network. A tag without an entry falls back to the
    networks that accept generic validation formats.
    """
    if not detected_format:
        return list_networks()
    try:
        tag = DetectedFormat(detected_format)
    except ValueError:
        return DEFAULT_VALIDATION_NETWORKS
    return FORMAT_NETWORKS.get(tag, DEFAULT_VALIDATION_NETWORKS)


def is_format_allowed_for_network(
    detected_format: Optional[Union[DetectedFormat, str]],
    network: Union[Network, str]
) -> bool:
    """Check if a detected format may be deployed to a network."""
    if not detected_format:
        return True
    return Network(network) in allowed_networks_for_format(detected_format)


# ============================================================================
# DISPLAY NAMES
# ============================================================================

FORMAT_NAME_MAP: Dict[str, str] = {
    # Standard banner sizes
    "300x250": "banner", "300x300": "banner", "300x600": "banner",
    "480x300": "banner", "480x480": "banner", "970x210": "banner",
    "970x310": "banner", "728x90": "banner", "320x100": "banner",
    "160x600": "banner", "120x600": "banner", "970x250": "banner",
    "320x50": "banner", "468x60": "banner", "336x280": "banner",
    "250x250": "banner", "200x200": "banner", "600x314": "banner",
    # Special formats
    "2560x1440": "branding",
    "2000x1400": "branding-sklik",
    "720x1280": "interscroller",
    "1200x628": "kombi",
    "1200x1200": "kombi",
    "461x100": "exclusive-trigger",
    "1100x500": "exclusive-banner",
}

# Checked in order, first substring hit wins
_PLACEMENT_DISPLAY_NAMES = [
    ("branding-scratcher", "scratcher"),
    ("branding-uncover", "uncover"),
    ("branding-videopanel", "videopanel"),
    ("branding-sklik", "branding-sklik"),
    ("branding", "branding"),
    ("interscroller", "interscroller"),
    ("spinner", "spinner"),
    ("spincube", "spincube"),
    ("kombi", "kombi"),
]


def get_format_display_name(dimensions: Optional[str], placement_key: Optional[str]) -> str:
    """Short format label used in reports and generated file names."""
    key = placement_key or ""
    for fragment, display_name in _PLACEMENT_DISPLAY_NAMES:
        if fragment in key:
            return display_name

    if "exclusive" in key:
        if dimensions == "461x100":
            return "exclusive-trigger"
        if dimensions == "1100x500":
            return "exclusive-banner"
        if "desktop" in key:
            return "exclusive-desktop"
        if "mobile" in key or "mobil" in key:
            return "exclusive-mobile"
        if "app" in key:
            return "exclusive-aplikace"
        return "exclusive"

    return FORMAT_NAME_MAP.get(dimensions or "", "banner")
