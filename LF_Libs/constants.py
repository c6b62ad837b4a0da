"""
Constants and configuration values for Logo Forge.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the imaging core.
"""

# Pixel / channel constants
MAX_CHANNEL_VALUE = 255
MASK_MIDPOINT = 127.5
TRANSPARENT = (0, 0, 0, 0)
OPAQUE_WHITE = (255, 255, 255, 255)

# Edit constants
EDIT_HISTORY_LIMIT = 20

# Mask constants
DEFAULT_BRUSH_RADIUS = 20.0
SOFT_EDGE_PASSES = 3
SOFT_EDGE_BASE_OPACITY = 0.3
SOFT_EDGE_OPACITY_STEP = 0.1
SOFT_EDGE_WIDTH_STEP = 4.0

# Palette extraction constants
DEFAULT_MAX_COLORS = 6
PALETTE_SAMPLE_SIZE = (50, 50)
PALETTE_EXTRA_CLUSTERS = 2
PALETTE_ITERATIONS = 10
PALETTE_MIN_ALPHA = 128
PALETTE_MIN_COVERAGE = 0.01
PALETTE_DUPLICATE_DISTANCE = 30.0
DEFAULT_PALETTE_SEED = 0

# Export folder naming
EXPORT_FOLDER_PREFIX = "export-"
EXPORT_TIMESTAMP_FORMAT = "%Y-%m-%d-%H%M%S"

# Bundle names
BUNDLE_IOS = "ios"
BUNDLE_ANDROID = "android"
BUNDLE_FAVICON = "favicon"
BUNDLE_SVG = "svg"

# Manifest kinds
MANIFEST_ICON_SET = "icon_set_contents"
MANIFEST_WEB = "web_manifest"
MANIFEST_ICO = "ico_container"

# Manifest file names
ICON_SET_FOLDER = "AppIcon.appiconset"
ICON_SET_CONTENTS_FILE = "Contents.json"
WEB_MANIFEST_FILE = "site.webmanifest"
FAVICON_ICO_FILE = "favicon.ico"
VECTOR_FILE = "logo.svg"

# Manifest content defaults
ICON_SET_AUTHOR = "Logo Forge"
ICON_SET_VERSION = 1
WEB_MANIFEST_THEME_COLOR = "#ffffff"
WEB_MANIFEST_BACKGROUND_COLOR = "#ffffff"
WEB_MANIFEST_DISPLAY = "standalone"
WEB_MANIFEST_ICON_SIZES = (192, 512)

# ICO container layout
ICO_FRAME_SIZES = (16, 32, 48)
ICO_HEADER_SIZE = 6
ICO_DIRECTORY_ENTRY_SIZE = 16
ICO_TYPE_ICON = 1
ICO_COLOR_PLANES = 1
ICO_BITS_PER_PIXEL = 32
ICO_MAX_DIMENSION = 256

# File naming
DEFAULT_OUTPUT_FORMAT = "PNG"
