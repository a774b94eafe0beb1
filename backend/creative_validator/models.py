"""
Pydantic models for the Creative Compatibility Engine.
"""
from typing import Optional, List, Tuple, Dict
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from enum import Enum

from creative_validator.utils import parse_dimensions


class Network(str, Enum):
    """Ad-delivery networks known to the registry."""
    ADFORM = "ADFORM"
    SOS = "SOS"
    ONEGAR = "ONEGAR"
    SKLIK = "SKLIK"
    HP_EXCLUSIVE = "HP_EXCLUSIVE"
    GOOGLE_ADS = "GOOGLE_ADS"


class Tier(str, Enum):
    """Campaign priority level."""
    HIGH = "HIGH"
    LOW = "LOW"


class DetectedFormat(str, Enum):
    """Semantic format tags inferred from file and folder naming."""
    # SOS rich media and in-article
    INARTICLE = "inarticle"
    SPINCUBE = "spincube"
    EXCLUSIVE = "exclusive"
    BRANDING_SCRATCHER = "branding-scratcher"
    BRANDING_UNCOVER = "branding-uncover"
    BRANDING_VIDEOPANEL = "branding-videopanel"
    SPINNER = "spinner"
    NATIVNI_INZERAT = "nativni-inzerat"
    # Branding
    BRANDING = "branding"
    BRANDING_SKLIK = "branding-sklik"
    # Interscroller
    INTERSCROLLER = "interscroller"
    MOBILNI_INTERSCROLLER = "mobilni-interscroller"
    KOMBI = "kombi"
    # Standard banners
    SPONZOR_SLUZBY = "sponzor-sluzby"
    MOBILNI_SQUARE = "mobilni-square"
    MOBILNI_SQUARE_PREMIUM = "mobilni-square-premium"
    SKYSCRAPER = "skyscraper"
    SKYSCRAPER_STICKY = "skyscraper-sticky"
    WALLPAPER = "wallpaper"
    LEADERBOARD = "leaderboard"
    LEADERBOARD_MIDDLE = "leaderboard-middle"
    MOBILNI_LEADERBOARD = "mobilni-leaderboard"
    RECTANGLE = "rectangle"
    HTML5_BANNER = "html5-banner"
    # HP exclusive
    EXCLUSIVE_DESKTOP_TRIGGER = "exclusive-desktop-trigger"
    EXCLUSIVE_DESKTOP_BANNER = "exclusive-desktop-banner"
    EXCLUSIVE_MOBILE_WALLPAPER = "exclusive-mobile-wallpaper"
    EXCLUSIVE_MOBILE_SQUARE = "exclusive-mobile-square"
    EXCLUSIVE_APP_WALLPAPER = "exclusive-app-wallpaper"
    EXCLUSIVE_APP_SQUARE = "exclusive-app-square"
    # Universal App Campaigns
    UAC = "uac"
    UAC_SQUARE = "uac-square"
    UAC_PORTRAIT = "uac-portrait"
    UAC_LANDSCAPE = "uac-landscape"
    SOCIAL_MEDIA = "social-media"


class IssueSeverity(str, Enum):
    """Severity levels for validation findings."""
    HARD = "hard"
    WARN = "warn"


class ValidationIssue(BaseModel):
    """A single finding. HARD findings block, WARN findings are informational."""
    severity: IssueSeverity
    code: str
    message: str


class FindingSet(BaseModel):
    """Base for results aggregated from findings."""
    findings: List[ValidationIssue] = []

    @computed_field
    @property
    def issues(self) -> List[str]:
        return [f.message for f in self.findings if f.severity == IssueSeverity.HARD]

    @computed_field
    @property
    def warnings(self) -> List[str]:
        return [f.message for f in self.findings if f.severity == IssueSeverity.WARN]

    @computed_field
    @property
    def valid(self) -> bool:
        return not self.issues


class ValidationOutcome(FindingSet):
    """Result of validating one asset against one placement."""


class Html5ValidationResult(FindingSet):
    """Result of the structural check of a packaged HTML5 banner."""
    is_packaged: bool = False
    dimensions: Optional[str] = None


class MultiFileSpec(BaseModel):
    """Descriptor of a placement that needs several cooperating files."""
    model_config = ConfigDict(frozen=True)

    required_count: int = Field(ge=2)
    roles: Tuple[str, ...]
    paired_with: Optional[str] = None


class PlacementSpec(BaseModel):
    """One placement offered by one network."""
    model_config = ConfigDict(frozen=True)

    display_name: str
    dimensions: Tuple[str, ...]
    max_size_kb: int = Field(gt=0)
    allowed_formats: Tuple[str, ...]
    tiers: Optional[Tuple[Tier, ...]] = None
    multi_file: Optional[MultiFileSpec] = None
    device: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("dimensions", "allowed_formats")
    @classmethod
    def must_not_be_empty(cls, value):
        if not value:
            raise ValueError("must contain at least one entry")
        return value

    @field_validator("dimensions")
    @classmethod
    def dimensions_are_parseable(cls, value):
        for dimensions in value:
            parse_dimensions(dimensions)
        return value


class FileAsset(BaseModel):
    """One analyzed input file."""
    model_config = ConfigDict(frozen=True)

    name: str
    dimensions: Optional[str] = Field(default=None, pattern=r"^\d+x\d+$")
    size_kb: int = Field(ge=0)
    file_format: str
    color_space: str = "RGB"
    color_space_valid: bool = True
    detected_format: Optional[DetectedFormat] = None
    folder_path: str = ""
    assigned_network: Optional[Network] = None
    html5_validation: Optional[Html5ValidationResult] = None

    @property
    def is_html5(self) -> bool:
        return self.file_format == "html5"


class MatchCandidate(BaseModel):
    """A placement an asset could occupy."""
    network: Network
    tier: Optional[Tuple[Tier, ...]] = None
    placement_key: str
    spec: PlacementSpec
    format_display: str
    size_valid: bool
    size_limit: int
    file_size_kb: int


class MultiFileGroup(BaseModel):
    """Assets that together form one composite creative."""
    model_config = ConfigDict(frozen=True)

    format_tag: str
    network: Network
    members: Tuple[FileAsset, ...]
    complete: bool
    required_count: int
    roles: Tuple[str, ...]
    folder_path: str
    notes: Optional[str] = None

    @computed_field
    @property
    def missing_count(self) -> int:
        return max(0, self.required_count - len(self.members))


class CompatibleEntry(BaseModel):
    """A placement the asset passed."""
    network: Network
    tier: Optional[Tier] = None
    placement_key: str
    format_display: str
    display_name: str
    warnings: List[str] = []


class IncompatibleEntry(BaseModel):
    """A placement the asset matched but failed."""
    network: Network
    tier: Optional[Tier] = None
    placement_key: str
    format_display: str
    reason: str
    warnings: List[str] = []


class AssetCompatibility(BaseModel):
    """Per-asset compatibility report."""
    asset_name: str
    compatible: List[CompatibleEntry] = []
    incompatible: List[IncompatibleEntry] = []


class ErrorFile(BaseModel):
    file: str
    reason: str


class NetworkTierStats(BaseModel):
    """Aggregated counts for one network and tier."""
    eligible_assets: int = 0
    total_assets: int = 0
    errors: int = 0
    eligible_placements: int = 0
    error_files: List[ErrorFile] = []


class CollectionReport(BaseModel):
    """Compatibility reports and composite groups for a whole upload."""
    reports: List[AssetCompatibility] = []
    groups: List[MultiFileGroup] = []
    network_stats: Dict[str, Dict[str, NetworkTierStats]] = {}


class MatchRequest(BaseModel):
    """Request for enumerating candidate placements."""
    asset: FileAsset
    network: Optional[Network] = None
    tier: Optional[Tier] = None


class PlacementValidateRequest(BaseModel):
    """Request for validating an asset against one placement."""
    asset: FileAsset
    network: Network
    placement_key: str


class AssetsRequest(BaseModel):
    """Request carrying a whole asset collection."""
    assets: List[FileAsset]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    services: dict = {}
