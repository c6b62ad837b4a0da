"""
Logo Forge command line tool.

Usage:
    python logo_forge.py palette <image> [max_colors]
    python logo_forge.py edit <input> <output> [rotation] [padding]
    python logo_forge.py export <image> <destination> [bundle ...]

Examples:
    python logo_forge.py palette logo.png 4
    python logo_forge.py edit logo.png logo_rotated.png 90 16
    python logo_forge.py export logo.png ./exports ios android favicon
"""

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from PIL import Image

from LF_Libs.ExportLib import BUNDLES, ExportEncoder, encode_png, read_icon_container
from LF_Libs.ImageEditingLib import EditParameters, RasterImage, Rotation, apply_edits
from LF_Libs.PaletteLib import extract_palette
from LF_Libs.constants import BUNDLE_FAVICON, DEFAULT_MAX_COLORS, FAVICON_ICO_FILE
from LF_Libs.errors import LogoForgeError


def print_usage() -> None:
    print("Usage:")
    print("  python logo_forge.py palette <image> [max_colors]")
    print("  python logo_forge.py edit <input> <output> [rotation] [padding]")
    print("  python logo_forge.py export <image> <destination> [bundle ...]")
    print(f"\nBundles: {', '.join(BUNDLES)} (default: ios android)")
    print("Rotation: 0, 90, 180 or 270 degrees clockwise")


def load_image(path: str) -> RasterImage:
    """Open an image file as a RasterImage."""
    with Image.open(path) as image:
        image.load()
        return RasterImage.from_pil(image)


def run_palette(args: List[str]) -> int:
    if not args:
        print("Error: palette requires an image path")
        return 1

    max_colors = DEFAULT_MAX_COLORS
    if len(args) >= 2:
        try:
            max_colors = int(args[1])
        except ValueError:
            print("Error: max_colors must be an integer")
            return 1

    palette = extract_palette(load_image(args[0]), max_colors=max_colors)
    if palette.is_empty:
        print("No opaque colors found")
        return 0

    print(f"Palette ({len(palette)} colors):")
    for swatch in palette:
        print(f"  {swatch.hex}  {swatch.coverage * 100:5.1f}%")
    return 0


def run_edit(args: List[str]) -> int:
    if len(args) < 2:
        print("Error: edit requires an input and an output path")
        return 1

    try:
        rotation = Rotation(int(args[2])) if len(args) >= 3 else Rotation.NONE
        padding = int(args[3]) if len(args) >= 4 else 0
    except ValueError:
        print("Error: rotation must be 0, 90, 180 or 270 and padding an integer")
        return 1

    params = EditParameters(padding=padding, rotation=rotation)
    result = apply_edits(load_image(args[0]), params)

    output_path = Path(args[1])
    output_path.write_bytes(encode_png(result))
    print(f"Saved {result.width}x{result.height} image to {output_path}")
    return 0


def run_export(args: List[str]) -> int:
    if len(args) < 2:
        print("Error: export requires an image path and a destination")
        return 1

    bundles = args[2:] or None
    encoder = ExportEncoder()

    def report(progress):
        print(f"  [{progress.percentage * 100:3.0f}%] {progress.status_text}")

    export_dir = encoder.export(load_image(args[0]), bundles, args[1], progress=report)

    ico_path = export_dir / BUNDLE_FAVICON / FAVICON_ICO_FILE
    if ico_path.exists():
        entries = read_icon_container(ico_path.read_bytes())
        sizes = ", ".join(f"{entry.width}x{entry.height}" for entry in entries)
        print(f"  {FAVICON_ICO_FILE}: {len(entries)} frames ({sizes})")

    print(f"✓ Export written to {export_dir}")
    return 0


COMMANDS = {
    "palette": run_palette,
    "edit": run_edit,
    "export": run_export,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool and return the exit code."""
    argv = sys.argv[1:] if argv is None else argv

    if not argv or argv[0] not in COMMANDS:
        print_usage()
        return 1

    command, args = argv[0], argv[1:]
    if args and not os.path.exists(args[0]):
        print(f"Error: Image file not found: {args[0]}")
        return 1

    try:
        return COMMANDS[command](args)
    except (LogoForgeError, OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main())
