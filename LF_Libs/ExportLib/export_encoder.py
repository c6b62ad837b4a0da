"""
Export Encoder.

Resizes an image to the exact pixel size of every target in the selected
bundles, writes the PNG files and the bundle manifests, and assembles the
favicon.ico container.

Output layout:
    <destination>/export-YYYY-MM-DD-HHMMSS/
        ios/AppIcon.appiconset/   Contents.json + icon PNGs
        android/                  mipmap-*/ic_launcher.png + playstore-icon.png
        favicon/                  PNGs + site.webmanifest + favicon.ico
        svg/                      logo.svg from the vectorizer

Failure policy:
    Export is fail-fast. The first directory, write or encoding failure
    aborts the whole export with ExportIOError / EncodingError. Files that
    were already written stay on disk and later bundles are not attempted.

Classes:
    ExportProgress: Progress snapshot passed to the progress callback
    ExportEncoder: Writes bundles to disk

Functions:
    resize_exact: Resample to an exact pixel size
    strip_alpha: Flatten onto opaque white
    encode_png: Encode a RasterImage as PNG bytes
    render_target: Resize (and flatten) an image for one ExportTarget
    generate_favicon_ico: Build a 16/32/48 px ICO container
    total_export_units: Number of progress units for a set of bundles
"""

import io
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from PIL import Image

from LF_Libs.ExportLib.export_bundles import (
    Bundle,
    ExportOptions,
    ExportTarget,
    build_icon_set_contents,
    get_bundle,
)
from LF_Libs.ExportLib.icon_container import build_icon_container
from LF_Libs.ImageEditingLib.image_models import RasterImage
from LF_Libs.constants import (
    DEFAULT_OUTPUT_FORMAT,
    EXPORT_FOLDER_PREFIX,
    EXPORT_TIMESTAMP_FORMAT,
    FAVICON_ICO_FILE,
    ICO_FRAME_SIZES,
    ICON_SET_CONTENTS_FILE,
    MANIFEST_ICO,
    MANIFEST_ICON_SET,
    MANIFEST_WEB,
    OPAQUE_WHITE,
    VECTOR_FILE,
    WEB_MANIFEST_FILE,
)
from LF_Libs.errors import EncodingError, ExportIOError

logger = logging.getLogger(__name__)

# Converts a raster image to vector (SVG) bytes
Vectorizer = Callable[[RasterImage], bytes]
ProgressCallback = Callable[["ExportProgress"], None]


# ============================================================================
# Pixel Operations
# ============================================================================

def resize_exact(image: RasterImage, width: int, height: int) -> RasterImage:
    """
    Resample an image to exactly width x height pixels (Lanczos).

    Raises:
        ValueError: If width or height is below 1
    """
    if width < 1 or height < 1:
        raise ValueError(f"Target size must be at least 1x1, got {width}x{height}")
    if image.size == (width, height):
        return image

    resized = image.to_pil().resize((width, height), Image.Resampling.LANCZOS)
    return RasterImage(resized, has_alpha=image.has_alpha)


def strip_alpha(image: RasterImage) -> RasterImage:
    """Composite an image over opaque white and mark it as alpha-free."""
    background = Image.new("RGBA", image.size, OPAQUE_WHITE)
    flattened = Image.alpha_composite(background, image.to_pil())
    return RasterImage(flattened, has_alpha=False)


def encode_png(image: RasterImage) -> bytes:
    """
    Encode an image as PNG.

    Images without an alpha channel are written as RGB PNGs.

    Raises:
        EncodingError: If Pillow cannot encode the pixels
    """
    pil_image = image.to_pil()
    if not image.has_alpha:
        pil_image = pil_image.convert("RGB")

    buffer = io.BytesIO()
    try:
        pil_image.save(buffer, format=DEFAULT_OUTPUT_FORMAT)
    except (OSError, ValueError) as e:
        raise EncodingError(f"Failed to encode image as PNG: {e}") from e
    return buffer.getvalue()


def render_target(image: RasterImage, target: ExportTarget) -> RasterImage:
    """Resize an image for a target, flattening it if the target is opaque."""
    resized = resize_exact(image, target.width, target.height)
    if target.opaque:
        resized = strip_alpha(resized)
    return resized


def generate_favicon_ico(image: RasterImage, sizes: Sequence[int] = ICO_FRAME_SIZES) -> bytes:
    """Build a multi-resolution ICO with one PNG frame per size."""
    frames = [
        (size, size, encode_png(resize_exact(image, size, size)))
        for size in sizes
    ]
    return build_icon_container(frames)


def total_export_units(bundles: Sequence[Bundle]) -> int:
    """Progress units: one per target image, one per vector bundle."""
    return sum(bundle.unit_count for bundle in bundles)


# ============================================================================
# Progress
# ============================================================================

@dataclass(frozen=True)
class ExportProgress:
    """Progress snapshot.

    Attributes:
        current_bundle: Bundle being exported
        completed: Units finished so far across all bundles
        total: Units in the whole export
    """
    current_bundle: Bundle
    completed: int
    total: int

    @property
    def percentage(self) -> float:
        """Completion as a fraction (0.0-1.0)."""
        if self.total <= 0:
            return 0.0
        return self.completed / self.total

    @property
    def status_text(self) -> str:
        return (
            f"Exporting {self.current_bundle.display_name}... "
            f"({self.completed}/{self.total})"
        )


# ============================================================================
# Encoder
# ============================================================================

class ExportEncoder:
    """
    Writes platform bundles for one image to disk.

    The encoder keeps no state between export() calls. Collaborators are
    passed in explicitly: a vectorizer is only needed for vector bundles.

    Example:
        >>> encoder = ExportEncoder()
        >>> out_dir = encoder.export(image, ["ios", "favicon"], Path("/tmp/exports"))
    """

    def __init__(
        self,
        vectorizer: Optional[Vectorizer] = None,
        options: Optional[ExportOptions] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.vectorizer = vectorizer
        self.options = options or ExportOptions()
        self.clock = clock

    def export(
        self,
        image: RasterImage,
        bundles: Optional[Sequence[Union[Bundle, str]]] = None,
        destination: Union[str, Path] = ".",
        progress: Optional[ProgressCallback] = None,
    ) -> Path:
        """
        Export an image to the given bundles under a timestamped folder.

        Args:
            image: Image to export
            bundles: Bundles or bundle names; None uses the options' selection
            destination: Directory in which the export folder is created
            progress: Called before each bundle and after every written unit

        Returns:
            Path to the export folder

        Raises:
            TypeError: If image is not a RasterImage
            ValueError: If a vector bundle is requested without a vectorizer
            ExportIOError: If a directory or file cannot be written
            EncodingError: If an image cannot be encoded
        """
        if not isinstance(image, RasterImage):
            raise TypeError(f"Expected RasterImage, got {type(image)}")

        selected = self._resolve_bundles(bundles)
        if self.vectorizer is None and any(bundle.vector for bundle in selected):
            raise ValueError("A vectorizer is required to export vector bundles")

        folder_name = f"{EXPORT_FOLDER_PREFIX}{self.clock().strftime(EXPORT_TIMESTAMP_FORMAT)}"
        export_dir = Path(destination) / folder_name
        self._make_dir(export_dir, None)
        logger.info(f"Exporting {len(selected)} bundles to {export_dir}")

        total = total_export_units(selected)
        completed = 0

        for bundle in selected:
            if progress:
                progress(ExportProgress(bundle, completed, total))

            for _ in self._export_bundle(bundle, image, export_dir):
                completed += 1
                if progress:
                    progress(ExportProgress(bundle, completed, total))

            logger.info(f"Bundle complete: {bundle.name}")

        return export_dir

    def export_bundle(self, bundle: Bundle, image: RasterImage, export_dir: Union[str, Path]) -> List[Path]:
        """
        Write a single bundle into an existing export folder.

        Returns:
            Paths of the unit files written (targets or the vector file)
        """
        return list(self._export_bundle(bundle, image, Path(export_dir)))

    def _export_bundle(self, bundle: Bundle, image: RasterImage, export_dir: Path):
        """Write one bundle, yielding the path of each completed unit."""
        bundle_dir = export_dir / bundle.directory
        self._make_dir(bundle_dir, bundle)
        logger.debug(f"Writing bundle '{bundle.name}' to {bundle_dir}")

        self._write_manifests(bundle, image, bundle_dir)

        if bundle.vector:
            if self.vectorizer is None:
                raise ValueError("A vectorizer is required to export vector bundles")
            data = self.vectorizer(image)
            if not isinstance(data, (bytes, bytearray)):
                raise TypeError(f"Vectorizer must return bytes, got {type(data)}")

            vector_path = bundle_dir / VECTOR_FILE
            self._write_bytes(vector_path, bytes(data), bundle)
            logger.debug(f"{VECTOR_FILE} saved ({len(data)} bytes)")
            yield vector_path
            return

        for target in bundle.targets:
            output_dir = bundle_dir
            if target.subfolder:
                output_dir = bundle_dir / target.subfolder
                self._make_dir(output_dir, bundle)

            output_path = output_dir / target.filename
            try:
                data = encode_png(render_target(image, target))
            except EncodingError as e:
                raise EncodingError(f"{e} ({bundle.name}/{target.relative_path})", output_path) from e

            self._write_bytes(output_path, data, bundle)
            logger.debug(f"{target.relative_path} ({target.width}x{target.height})")
            yield output_path

    def _write_manifests(self, bundle: Bundle, image: RasterImage, bundle_dir: Path) -> None:
        for manifest in bundle.manifests:
            if manifest == MANIFEST_ICON_SET:
                self._write_bytes(
                    bundle_dir / ICON_SET_CONTENTS_FILE,
                    build_icon_set_contents().encode("utf-8"),
                    bundle,
                )
            elif manifest == MANIFEST_WEB:
                self._write_bytes(
                    bundle_dir / WEB_MANIFEST_FILE,
                    self.options.web_manifest().encode("utf-8"),
                    bundle,
                )
            elif manifest == MANIFEST_ICO:
                ico_path = bundle_dir / FAVICON_ICO_FILE
                try:
                    data = generate_favicon_ico(image)
                except EncodingError as e:
                    raise EncodingError(f"{e} ({bundle.name}/{FAVICON_ICO_FILE})", ico_path) from e
                self._write_bytes(ico_path, data, bundle)
            else:
                raise ValueError(f"Unknown manifest kind '{manifest}' in bundle '{bundle.name}'")

    def _resolve_bundles(self, bundles: Optional[Sequence[Union[Bundle, str]]]) -> List[Bundle]:
        if bundles is None:
            return self.options.selected_bundles()

        resolved: List[Bundle] = []
        for item in bundles:
            bundle = item if isinstance(item, Bundle) else get_bundle(item)
            if bundle not in resolved:
                resolved.append(bundle)
        return resolved

    @staticmethod
    def _make_dir(path: Path, bundle: Optional[Bundle]) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportIOError(
                f"Failed to create directory: {e}",
                bundle.name if bundle else None,
                path,
            ) from e

    @staticmethod
    def _write_bytes(path: Path, data: bytes, bundle: Bundle) -> None:
        try:
            path.write_bytes(data)
        except OSError as e:
            raise ExportIOError(f"Failed to write file: {e}", bundle.name, path) from e
