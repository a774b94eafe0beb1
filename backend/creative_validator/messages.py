"""
Display text for validation findings.

All user-facing finding messages are defined here so that wording stays
consistent between the placement validator and the HTML5 validator.
"""

# Placement validation
DIMENSION_MISMATCH = "Dimension {actual} is not supported (expected: {expected})"
FORMAT_NOT_ALLOWED = "Format {actual} is not allowed (allowed: {allowed})"
SIZE_OVER_LIMIT = (
    "File size {size_kb}KB exceeds the {limit_kb}KB limit "
    "({tolerated_kb}KB with 5% tolerance)"
)
CMYK_COLOR_SPACE = "CMYK color space detected (RGB required)"

# HTML5 archive structure
ARCHIVE_UNREADABLE = "Archive could not be read: {error}"
TOO_MANY_FILES = "Too many files: {count} (maximum: {maximum})"
MISSING_ROOT_HTML = "Missing HTML file in the archive root"
MULTIPLE_ROOT_HTML = "More than one HTML file in the archive root: {count} (allowed: 1)"
DIRECTORY_TOO_DEEP = "Directory structure too deep: {path} (maximum: {maximum} levels)"
DISALLOWED_EXTENSIONS = "Disallowed file extensions: {files}"
DISALLOWED_EXTENSIONS_MORE = " and {count} more"

# HTML5 markup
MISSING_HTML_TAG = "Missing <html> tag"
MISSING_BODY_TAG = "Missing <body> tag"
MISSING_CLICKTHRU = "Missing __CLICKTHRU__ variable for the clickthrough URL"
MISSING_ANCHOR = "Missing <a> tag for the click"
MULTIPLE_ANCHORS = "More than one <a> tag found: {count} (allowed: 1)"
ANCHOR_TARGET_TOP = 'The <a> tag must have target="_top"'
PROHIBITED_FUNCTION = "Prohibited function: {function}"
EXTERNAL_RESOURCES = "Disallowed external resources: {urls}"

# HTML5 naming
DIMENSIONS_NOT_IN_NAME = (
    "Could not determine dimensions from the file name "
    "(expected format: HTML5_WIDTHxHEIGHT_name.zip)"
)
NAME_CONVENTION = "File name does not follow the recommended format HTML5_WIDTHxHEIGHT_name.zip"

# Multi-file groups
SPINNER_REUSED_PAIR = "Using 2 images (will be used twice)"
