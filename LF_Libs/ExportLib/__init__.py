"""
ExportLib - Platform icon export

This module resizes images to exact pixel targets for each platform bundle,
writes bundle manifests and builds multi-resolution ICO containers.
"""

from LF_Libs.ExportLib.export_bundles import (
    ANDROID_BUNDLE,
    BUNDLES,
    FAVICON_BUNDLE,
    IOS_BUNDLE,
    IOS_ICON_SET,
    SVG_BUNDLE,
    Bundle,
    ExportOptions,
    ExportTarget,
    IconSetEntry,
    build_icon_set_contents,
    build_web_manifest,
    get_bundle,
)
from LF_Libs.ExportLib.icon_container import (
    IconDirectoryEntry,
    build_icon_container,
    read_icon_container,
)
from LF_Libs.ExportLib.export_encoder import (
    ExportEncoder,
    ExportProgress,
    encode_png,
    generate_favicon_ico,
    render_target,
    resize_exact,
    strip_alpha,
    total_export_units,
)

__all__ = [
    "ANDROID_BUNDLE",
    "BUNDLES",
    "FAVICON_BUNDLE",
    "IOS_BUNDLE",
    "IOS_ICON_SET",
    "SVG_BUNDLE",
    "Bundle",
    "ExportOptions",
    "ExportTarget",
    "IconSetEntry",
    "build_icon_set_contents",
    "build_web_manifest",
    "get_bundle",
    "IconDirectoryEntry",
    "build_icon_container",
    "read_icon_container",
    "ExportEncoder",
    "ExportProgress",
    "encode_png",
    "generate_favicon_ico",
    "render_target",
    "resize_exact",
    "strip_alpha",
    "total_export_units",
]
