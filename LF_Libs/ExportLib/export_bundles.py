"""
Platform Export Bundles.

A bundle is a named, fixed list of output images for one deployment target
plus the manifest files that target needs next to the images.

Bundles:
    ios: AppIcon.appiconset with Contents.json (1024px marketing icon is opaque)
    android: Launcher icons in mipmap-* density folders plus the Play Store icon
    favicon: Web favicons, site.webmanifest and a multi-resolution favicon.ico
    svg: Single vector file produced by an external vectorizer

Classes:
    ExportTarget: One output image (pixel size, filename, optional subfolder)
    IconSetEntry: One image row of an iOS Contents.json
    Bundle: A named set of targets and manifests
    ExportOptions: User selection of bundles and web manifest fields

Functions:
    get_bundle: Look up a bundle by name
    build_icon_set_contents: Contents.json for the iOS icon set
    build_web_manifest: site.webmanifest for the favicon bundle
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from LF_Libs.constants import (
    BUNDLE_ANDROID,
    BUNDLE_FAVICON,
    BUNDLE_IOS,
    BUNDLE_SVG,
    ICON_SET_AUTHOR,
    ICON_SET_FOLDER,
    ICON_SET_VERSION,
    MANIFEST_ICO,
    MANIFEST_ICON_SET,
    MANIFEST_WEB,
    WEB_MANIFEST_BACKGROUND_COLOR,
    WEB_MANIFEST_DISPLAY,
    WEB_MANIFEST_ICON_SIZES,
    WEB_MANIFEST_THEME_COLOR,
)


@dataclass(frozen=True)
class ExportTarget:
    """A single exported image.

    Attributes:
        width: Output width in pixels
        height: Output height in pixels
        filename: Output file name
        subfolder: Optional folder inside the bundle (Android density buckets)
        opaque: Strip alpha by compositing over white before encoding
    """
    width: int
    height: int
    filename: str
    subfolder: Optional[str] = None
    opaque: bool = False

    def __post_init__(self):
        """Validate target parameters."""
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Export size must be at least 1x1, got {self.width}x{self.height}")
        if not self.filename or "/" in self.filename or "\\" in self.filename:
            raise ValueError(f"filename must be a plain file name, got {self.filename!r}")
        if self.subfolder is not None and (".." in self.subfolder or self.subfolder.startswith("/")):
            raise ValueError(f"Invalid subfolder: {self.subfolder!r}")

    @classmethod
    def square(
        cls,
        size: int,
        filename: str,
        subfolder: Optional[str] = None,
        opaque: bool = False,
    ) -> "ExportTarget":
        return cls(size, size, filename, subfolder, opaque)

    @property
    def relative_path(self) -> str:
        if self.subfolder:
            return f"{self.subfolder}/{self.filename}"
        return self.filename


@dataclass(frozen=True)
class IconSetEntry:
    """One image in an iOS icon set: point size, scale and device idiom."""
    point_size: float
    scale: int
    idiom: str
    filename: str
    opaque: bool = False

    @property
    def pixel_size(self) -> int:
        return int(round(self.point_size * self.scale))

    @property
    def size_label(self) -> str:
        points = f"{self.point_size:g}"
        return f"{points}x{points}"

    def to_target(self) -> ExportTarget:
        return ExportTarget.square(self.pixel_size, self.filename, opaque=self.opaque)

    def to_dict(self) -> Dict[str, str]:
        return {
            "size": self.size_label,
            "idiom": self.idiom,
            "scale": f"{self.scale}x",
            "filename": self.filename,
        }


@dataclass(frozen=True)
class Bundle:
    """A named, fixed export layout.

    Attributes:
        name: Bundle identifier ("ios", "android", ...)
        display_name: Human-readable name
        directory: Bundle folder relative to the export folder
        targets: Images to resize and write
        manifests: Manifest kinds to emit (see constants.MANIFEST_*)
        vector: True if the bundle's single output comes from the vectorizer
    """
    name: str
    display_name: str
    directory: str
    targets: Tuple[ExportTarget, ...] = ()
    manifests: Tuple[str, ...] = ()
    vector: bool = False

    @property
    def unit_count(self) -> int:
        """Progress units: one per target, one for a vector bundle."""
        return 1 if self.vector else len(self.targets)


# ============================================================================
# Size Tables
# ============================================================================

IOS_ICON_SET: Tuple[IconSetEntry, ...] = (
    # iPhone
    IconSetEntry(20, 2, "iphone", "icon-20@2x.png"),
    IconSetEntry(20, 3, "iphone", "icon-20@3x.png"),
    IconSetEntry(29, 2, "iphone", "icon-29@2x.png"),
    IconSetEntry(29, 3, "iphone", "icon-29@3x.png"),
    IconSetEntry(40, 2, "iphone", "icon-40@2x.png"),
    IconSetEntry(40, 3, "iphone", "icon-40@3x.png"),
    IconSetEntry(60, 2, "iphone", "icon-60@2x.png"),
    IconSetEntry(60, 3, "iphone", "icon-60@3x.png"),
    # iPad
    IconSetEntry(20, 1, "ipad", "icon-20.png"),
    IconSetEntry(20, 2, "ipad", "icon-20@2x-ipad.png"),
    IconSetEntry(29, 1, "ipad", "icon-29.png"),
    IconSetEntry(29, 2, "ipad", "icon-29@2x-ipad.png"),
    IconSetEntry(40, 1, "ipad", "icon-40.png"),
    IconSetEntry(40, 2, "ipad", "icon-40@2x-ipad.png"),
    IconSetEntry(76, 1, "ipad", "icon-76.png"),
    IconSetEntry(76, 2, "ipad", "icon-76@2x.png"),
    IconSetEntry(83.5, 2, "ipad", "icon-83.5@2x.png"),
    # App Store icon must not carry alpha
    IconSetEntry(1024, 1, "ios-marketing", "icon-1024.png", opaque=True),
)

IOS_TARGETS: Tuple[ExportTarget, ...] = tuple(entry.to_target() for entry in IOS_ICON_SET)

ANDROID_TARGETS: Tuple[ExportTarget, ...] = (
    ExportTarget.square(48, "ic_launcher.png", "mipmap-mdpi"),
    ExportTarget.square(72, "ic_launcher.png", "mipmap-hdpi"),
    ExportTarget.square(96, "ic_launcher.png", "mipmap-xhdpi"),
    ExportTarget.square(144, "ic_launcher.png", "mipmap-xxhdpi"),
    ExportTarget.square(192, "ic_launcher.png", "mipmap-xxxhdpi"),
    ExportTarget.square(512, "playstore-icon.png"),
)

FAVICON_TARGETS: Tuple[ExportTarget, ...] = (
    ExportTarget.square(16, "favicon-16x16.png"),
    ExportTarget.square(32, "favicon-32x32.png"),
    ExportTarget.square(48, "favicon-48x48.png"),
    ExportTarget.square(180, "apple-touch-icon.png"),
    ExportTarget.square(192, "android-chrome-192x192.png"),
    ExportTarget.square(512, "android-chrome-512x512.png"),
)

IOS_BUNDLE = Bundle(
    name=BUNDLE_IOS,
    display_name="iOS App Icon",
    directory=f"{BUNDLE_IOS}/{ICON_SET_FOLDER}",
    targets=IOS_TARGETS,
    manifests=(MANIFEST_ICON_SET,),
)

ANDROID_BUNDLE = Bundle(
    name=BUNDLE_ANDROID,
    display_name="Android Launcher",
    directory=BUNDLE_ANDROID,
    targets=ANDROID_TARGETS,
)

FAVICON_BUNDLE = Bundle(
    name=BUNDLE_FAVICON,
    display_name="Favicon",
    directory=BUNDLE_FAVICON,
    targets=FAVICON_TARGETS,
    manifests=(MANIFEST_WEB, MANIFEST_ICO),
)

SVG_BUNDLE = Bundle(
    name=BUNDLE_SVG,
    display_name="SVG Vector",
    directory=BUNDLE_SVG,
    vector=True,
)

BUNDLES: Dict[str, Bundle] = {
    bundle.name: bundle
    for bundle in (IOS_BUNDLE, ANDROID_BUNDLE, FAVICON_BUNDLE, SVG_BUNDLE)
}


def get_bundle(name: str) -> Bundle:
    """
    Look up a bundle by name (case-insensitive).

    Raises:
        ValueError: If no bundle has that name
    """
    key = str(name).strip().lower()
    if key not in BUNDLES:
        available = ", ".join(BUNDLES)
        raise ValueError(f"Unknown bundle '{name}'. Available bundles: {available}")
    return BUNDLES[key]


# ============================================================================
# Manifests
# ============================================================================

def build_icon_set_contents(
    entries: Tuple[IconSetEntry, ...] = IOS_ICON_SET,
    author: str = ICON_SET_AUTHOR,
) -> str:
    """Build the Contents.json text for an AppIcon.appiconset folder."""
    contents = {
        "images": [entry.to_dict() for entry in entries],
        "info": {
            "version": ICON_SET_VERSION,
            "author": author,
        },
    }
    return json.dumps(contents, indent=2)


def build_web_manifest(
    name: str = "",
    short_name: str = "",
    theme_color: str = WEB_MANIFEST_THEME_COLOR,
    background_color: str = WEB_MANIFEST_BACKGROUND_COLOR,
) -> str:
    """Build the site.webmanifest text referencing the Android Chrome icons."""
    manifest = {
        "name": name,
        "short_name": short_name,
        "icons": [
            {
                "src": f"/android-chrome-{size}x{size}.png",
                "sizes": f"{size}x{size}",
                "type": "image/png",
            }
            for size in WEB_MANIFEST_ICON_SIZES
        ],
        "theme_color": theme_color,
        "background_color": background_color,
        "display": WEB_MANIFEST_DISPLAY,
    }
    return json.dumps(manifest, indent=4)


# ============================================================================
# Options
# ============================================================================

@dataclass
class ExportOptions:
    """User preferences for an export run.

    Attributes:
        bundles: Names of the bundles to export
        app_name: Web manifest "name"
        short_name: Web manifest "short_name"
        theme_color: Web manifest theme color
        background_color: Web manifest background color
    """
    bundles: List[str] = field(default_factory=lambda: [BUNDLE_IOS, BUNDLE_ANDROID])
    app_name: str = ""
    short_name: str = ""
    theme_color: str = WEB_MANIFEST_THEME_COLOR
    background_color: str = WEB_MANIFEST_BACKGROUND_COLOR

    def selected_bundles(self) -> List[Bundle]:
        """Resolve bundle names, dropping duplicates but keeping order."""
        selected: List[Bundle] = []
        for name in self.bundles:
            bundle = get_bundle(name)
            if bundle not in selected:
                selected.append(bundle)
        return selected

    def web_manifest(self) -> str:
        return build_web_manifest(
            name=self.app_name,
            short_name=self.short_name,
            theme_color=self.theme_color,
            background_color=self.background_color,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "bundles": list(self.bundles),
            "app_name": self.app_name,
            "short_name": self.short_name,
            "theme_color": self.theme_color,
            "background_color": self.background_color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportOptions":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                   if k in cls.__dataclass_fields__}
        return cls(**filtered)
