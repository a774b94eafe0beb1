"""
HTML5 Banner Structural Validator.

Checks the archive layout and root markup of a packaged interactive banner
against the network rules: file count, a single root HTML file, directory
depth, allowed extensions, clickthrough anchor, prohibited exit calls and
external resources.
"""
import io
import re
import zipfile
import zlib
from typing import List, Optional, Tuple
from urllib.parse import urlsplit
import structlog

from creative_validator import messages
from creative_validator.models import Html5ValidationResult, IssueSeverity, ValidationIssue
from creative_validator.utils import find_dimensions, get_extension

logger = structlog.get_logger()


# ============================================================================
# CONFIGURATION
# ============================================================================

MAX_FILES = 40
MAX_SUBDIRECTORY_LEVELS = 2
MARKUP_EXTENSIONS = ["html", "htm"]

ALLOWED_EXTENSIONS = [
    "htm", "html", "css", "js", "gif", "png", "jpg", "jpeg", "svg", "webp",
    "avif", "woff", "woff2", "ttf", "eot", "json", "txt", "xml"
]

PROHIBITED_FUNCTIONS = [
    "window.open(",
    "Enabler.exit(",
    "mraid.open(",
    "gwd.actions.gwdGenericad.exit(",
    "gwdGoogleAd.exit(",
    "gwdGoogleAd.exitOverride(",
]

WHITELISTED_CDNS = [
    "fonts.googleapis.com",
    "cdnjs.cloudflare.com",
    "code.jquery.com",
    "cdn.jsdelivr.net",
    "ajax.googleapis.com",
]

CLICKTHRU_TOKEN = "__CLICKTHRU__"

# Offenders quoted in a single message
MAX_LISTED_EXTENSIONS = 3
MAX_LISTED_URLS = 2

_ANCHOR_PATTERN = re.compile(r"<a\s+[^>]*>", re.IGNORECASE)
_URL_PATTERN = re.compile(r"https?://[^\s\"']+", re.IGNORECASE)

# macOS resource forks added by Finder when zipping
_IGNORED_PREFIXES = ("__MACOSX/",)


def _hard(code: str, message: str) -> ValidationIssue:
    return ValidationIssue(severity=IssueSeverity.HARD, code=code, message=message)


def _warn(code: str, message: str) -> ValidationIssue:
    return ValidationIssue(severity=IssueSeverity.WARN, code=code, message=message)


# ============================================================================
# NAMING
# ============================================================================

def is_html5_banner_name(filename: str) -> bool:
    """Names like 'HTML5_970x210_leaderboard.zip' or '2511-HTML5-Kampan-300x250.zip'."""
    return "html5" in filename.lower() and filename.endswith(".zip")


def extract_dimensions_from_name(filename: str) -> Optional[str]:
    """First 'WIDTHxHEIGHT' token of a file name."""
    return find_dimensions(filename)


# ============================================================================
# ARCHIVE STRUCTURE
# ============================================================================

def list_archive_files(archive: zipfile.ZipFile) -> List[str]:
    """File members of an archive, without directories and resource forks."""
    return [
        info.filename for info in archive.infolist()
        if not info.is_dir() and not info.filename.startswith(_IGNORED_PREFIXES)
    ]


def count_directory_levels(path: str) -> int:
    """Directories above a member; a file in the archive root is at level 0."""
    parts = [p for p in path.split("/") if p and p != "."]
    return max(0, len(parts) - 1)


def find_root_markup_files(files: List[str]) -> List[str]:
    return [
        name for name in files
        if "/" not in name and get_extension(name) in MARKUP_EXTENSIONS
    ]


def validate_archive_structure(files: List[str]) -> Tuple[List[ValidationIssue], List[str]]:
    """
    Validate the file layout of a banner archive.

    Returns:
        Structural issues and the markup files found in the archive root
    """
    issues: List[ValidationIssue] = []

    if len(files) > MAX_FILES:
        issues.append(_hard(
            "TOO_MANY_FILES",
            messages.TOO_MANY_FILES.format(count=len(files), maximum=MAX_FILES)
        ))

    root_markup = find_root_markup_files(files)
    if not root_markup:
        issues.append(_hard("MISSING_ROOT_HTML", messages.MISSING_ROOT_HTML))
    elif len(root_markup) > 1:
        issues.append(_hard(
            "MULTIPLE_ROOT_HTML",
            messages.MULTIPLE_ROOT_HTML.format(count=len(root_markup))
        ))

    for name in files:
        if count_directory_levels(name) > MAX_SUBDIRECTORY_LEVELS:
            issues.append(_hard(
                "DIRECTORY_TOO_DEEP",
                messages.DIRECTORY_TOO_DEEP.format(path=name, maximum=MAX_SUBDIRECTORY_LEVELS)
            ))
            break  # Report once

    invalid = [
        f"{name} (.{get_extension(name)})" for name in files
        if get_extension(name) not in ALLOWED_EXTENSIONS
    ]
    if invalid:
        listed = ", ".join(invalid[:MAX_LISTED_EXTENSIONS])
        if len(invalid) > MAX_LISTED_EXTENSIONS:
            listed += messages.DISALLOWED_EXTENSIONS_MORE.format(
                count=len(invalid) - MAX_LISTED_EXTENSIONS
            )
        issues.append(_hard("DISALLOWED_EXTENSIONS", messages.DISALLOWED_EXTENSIONS.format(files=listed)))

    return issues, root_markup


# ============================================================================
# MARKUP
# ============================================================================

def is_whitelisted_url(url: str) -> bool:
    """True when the URL's host is a whitelisted CDN."""
    try:
        host = urlsplit(url).hostname or ""
    except ValueError:
        return False
    return host in WHITELISTED_CDNS


def find_external_urls(html_content: str) -> List[str]:
    """Absolute URLs that are not served from a whitelisted CDN."""
    return [
        url for url in _URL_PATTERN.findall(html_content)
        if not is_whitelisted_url(url)
    ]


def validate_html_content(html_content: str) -> List[ValidationIssue]:
    """Validate the root markup of a banner."""
    issues: List[ValidationIssue] = []
    html_lower = html_content.lower()

    if "<html" not in html_lower:
        issues.append(_hard("MISSING_HTML_TAG", messages.MISSING_HTML_TAG))
    if "<body" not in html_lower:
        issues.append(_hard("MISSING_BODY_TAG", messages.MISSING_BODY_TAG))

    if CLICKTHRU_TOKEN not in html_content:
        issues.append(_hard("MISSING_CLICKTHRU", messages.MISSING_CLICKTHRU))

    anchors = _ANCHOR_PATTERN.findall(html_content)
    if not anchors:
        issues.append(_hard("MISSING_ANCHOR", messages.MISSING_ANCHOR))
    elif len(anchors) > 1:
        issues.append(_hard("MULTIPLE_ANCHORS", messages.MULTIPLE_ANCHORS.format(count=len(anchors))))
    elif 'target="_top"' not in anchors[0] and "target='_top'" not in anchors[0]:
        issues.append(_hard("ANCHOR_TARGET", messages.ANCHOR_TARGET_TOP))

    for function in PROHIBITED_FUNCTIONS:
        if function in html_content:
            issues.append(_hard("PROHIBITED_FUNCTION", messages.PROHIBITED_FUNCTION.format(function=function)))

    external_urls = find_external_urls(html_content)
    if external_urls:
        listed = ", ".join(external_urls[:MAX_LISTED_URLS])
        if len(external_urls) > MAX_LISTED_URLS:
            listed += "..."
        issues.append(_hard("EXTERNAL_RESOURCES", messages.EXTERNAL_RESOURCES.format(urls=listed)))

    return issues


# ============================================================================
# MAIN VALIDATION FUNCTION
# ============================================================================

def validate_html5_banner(content: bytes, filename: str) -> Html5ValidationResult:
    """
    Validate a packaged HTML5 banner.

    Args:
        content: Raw archive bytes
        filename: Original archive name, used for dimensions and naming checks

    Returns:
        Html5ValidationResult; an unreadable archive yields a single issue
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except (zipfile.BadZipFile, OSError) as e:
        logger.warning("html5_archive_unreadable", filename=filename, error=str(e))
        return Html5ValidationResult(
            is_packaged=False,
            findings=[_hard("ARCHIVE_UNREADABLE", messages.ARCHIVE_UNREADABLE.format(error=str(e)))]
        )

    findings: List[ValidationIssue] = []
    dimensions = extract_dimensions_from_name(filename)
    if not dimensions:
        findings.append(_warn("DIMENSIONS_NOT_IN_NAME", messages.DIMENSIONS_NOT_IN_NAME))

    with archive:
        files = list_archive_files(archive)
        structure_issues, root_markup = validate_archive_structure(files)
        findings.extend(structure_issues)

        if not structure_issues and root_markup:
            try:
                html_content = archive.read(root_markup[0]).decode("utf-8", errors="replace")
            except (zipfile.BadZipFile, zlib.error, RuntimeError, OSError) as e:
                logger.warning("html5_markup_unreadable", filename=filename, error=str(e))
                findings.append(_hard("ARCHIVE_UNREADABLE", messages.ARCHIVE_UNREADABLE.format(error=str(e))))
            else:
                findings.extend(validate_html_content(html_content))

    if not is_html5_banner_name(filename):
        findings.append(_warn("NAME_CONVENTION", messages.NAME_CONVENTION))

    result = Html5ValidationResult(is_packaged=True, dimensions=dimensions, findings=findings)

    logger.info(
        "html5_banner_validated",
        filename=filename,
        valid=result.valid,
        files=len(files),
        issues=len(result.issues),
        warnings=len(result.warnings)
    )
    return result


def archive_contains_markup(content: bytes) -> bool:
    """Quick check: does a ZIP contain any HTML file at all?"""
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            return any(get_extension(name) in MARKUP_EXTENSIONS for name in archive.namelist())
    except (zipfile.BadZipFile, OSError):
        return False
