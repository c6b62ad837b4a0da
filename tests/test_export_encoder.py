"""
Tests for the Export Encoder.

Tests cover:
- Exact resizing and alpha stripping
- PNG encoding
- favicon.ico generation
- Full bundle layout on disk
- Custom bundles
- Progress reporting
- Vector bundles and the vectorizer collaborator
- Fail-fast error handling
"""

import io
import json
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import numpy as np
from PIL import Image

from LF_Libs.ExportLib.export_bundles import (
    ANDROID_BUNDLE,
    FAVICON_BUNDLE,
    IOS_BUNDLE,
    Bundle,
    ExportOptions,
    ExportTarget,
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
from LF_Libs.ExportLib.icon_container import read_icon_container
from LF_Libs.ImageEditingLib.image_models import RasterImage
from LF_Libs.errors import EncodingError, ExportIOError

FIXED_TIME = datetime(2024, 3, 5, 14, 7, 9)


def _fixed_clock():
    return FIXED_TIME


def _logo():
    """64x64 logo with a transparent border around an opaque red square."""
    image = Image.new("RGBA", (64, 64), (0, 0, 0, 0))
    image.paste((255, 0, 0, 255), (16, 16, 48, 48))
    return RasterImage.from_pil(image)


def _open_png(path):
    with Image.open(path) as image:
        image.load()
        return image.copy()


class TestPixelOperations(unittest.TestCase):
    """Test resize/strip/encode helpers."""

    def test_resize_exact(self):
        resized = resize_exact(_logo(), 16, 24)
        self.assertEqual(resized.size, (16, 24))

    def test_resize_same_size_returns_input(self):
        image = _logo()
        self.assertIs(resize_exact(image, 64, 64), image)

    def test_resize_invalid_size(self):
        with self.assertRaises(ValueError):
            resize_exact(_logo(), 0, 16)

    def test_strip_alpha_composites_over_white(self):
        stripped = strip_alpha(_logo())

        self.assertFalse(stripped.has_alpha)
        self.assertFalse(stripped.has_transparency)
        self.assertEqual(stripped.pixel(0, 0), (255, 255, 255, 255))
        self.assertEqual(stripped.pixel(32, 32), (255, 0, 0, 255))

    def test_small_red_upscaled_and_stripped_is_opaque(self):
        red = RasterImage.new(10, 10, (255, 0, 0, 255))
        target = ExportTarget.square(16, "red.png", opaque=True)

        result = render_target(red, target)
        decoded = _open_png(io.BytesIO(encode_png(result)))

        self.assertEqual(decoded.size, (16, 16))
        self.assertEqual(decoded.mode, "RGB")
        self.assertEqual(decoded.convert("RGBA").getchannel("A").getextrema(), (255, 255))

    def test_encode_png_keeps_alpha(self):
        decoded = _open_png(io.BytesIO(encode_png(_logo())))

        self.assertEqual(decoded.mode, "RGBA")
        self.assertEqual(decoded.getpixel((0, 0))[3], 0)

    def test_encode_failure_raises_encoding_error(self):
        with patch.object(Image.Image, "save", side_effect=OSError("encoder broke")):
            with self.assertRaises(EncodingError):
                encode_png(_logo())

    def test_favicon_ico_frames(self):
        data = generate_favicon_ico(_logo())

        self.assertEqual(data[:6], b"\x00\x00\x01\x00\x03\x00")
        entries = read_icon_container(data)
        self.assertEqual([e.width for e in entries], [16, 32, 48])

        first = entries[0]
        frame = _open_png(io.BytesIO(data[first.offset:first.offset + first.size]))
        self.assertEqual(frame.size, (16, 16))

    def test_favicon_ico_opens_with_pillow(self):
        data = generate_favicon_ico(_logo())

        with Image.open(io.BytesIO(data)) as ico:
            self.assertEqual(ico.format, "ICO")
            self.assertEqual(set(ico.info["sizes"]), {(16, 16), (32, 32), (48, 48)})

            ico.size = (48, 48)
            ico.load()
            self.assertEqual(ico.size, (48, 48))
            self.assertEqual(ico.convert("RGBA").getpixel((24, 24)), (255, 0, 0, 255))


class TestExportProgress(unittest.TestCase):
    """Test ExportProgress."""

    def test_percentage_and_status(self):
        progress = ExportProgress(IOS_BUNDLE, 9, 36)

        self.assertAlmostEqual(progress.percentage, 0.25)
        self.assertEqual(progress.status_text, "Exporting iOS App Icon... (9/36)")

    def test_zero_total(self):
        self.assertEqual(ExportProgress(IOS_BUNDLE, 0, 0).percentage, 0.0)

    def test_total_units(self):
        self.assertEqual(total_export_units([IOS_BUNDLE, ANDROID_BUNDLE]), 18 + 6)


class TestExportEncoder(unittest.TestCase):
    """Test ExportEncoder.export end to end."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.destination = Path(self.temp_dir.name)
        self.encoder = ExportEncoder(clock=_fixed_clock)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_timestamped_folder(self):
        export_dir = self.encoder.export(_logo(), ["android"], self.destination)

        self.assertEqual(export_dir, self.destination / "export-2024-03-05-140709")
        self.assertTrue(export_dir.is_dir())

    def test_custom_bundle_writes_exactly_its_targets(self):
        bundle = Bundle(
            name="custom",
            display_name="Custom",
            directory="custom",
            targets=(ExportTarget.square(16, "a.png"), ExportTarget.square(32, "b.png")),
        )

        export_dir = self.encoder.export(_logo(), [bundle], self.destination)

        files = sorted(p.relative_to(export_dir).as_posix()
                       for p in export_dir.rglob("*") if p.is_file())
        self.assertEqual(files, ["custom/a.png", "custom/b.png"])
        self.assertEqual(_open_png(export_dir / "custom" / "a.png").size, (16, 16))
        self.assertEqual(_open_png(export_dir / "custom" / "b.png").size, (32, 32))

    def test_ios_layout(self):
        export_dir = self.encoder.export(_logo(), ["ios"], self.destination)
        icon_set = export_dir / "ios" / "AppIcon.appiconset"

        contents = json.loads((icon_set / "Contents.json").read_text())
        for image in contents["images"]:
            self.assertTrue((icon_set / image["filename"]).is_file())

        marketing = _open_png(icon_set / "icon-1024.png")
        self.assertEqual(marketing.size, (1024, 1024))
        self.assertEqual(marketing.mode, "RGB")
        self.assertEqual(marketing.getpixel((0, 0)), (255, 255, 255))

        small = _open_png(icon_set / "icon-20.png")
        self.assertEqual(small.size, (20, 20))
        self.assertEqual(small.mode, "RGBA")

    def test_android_layout(self):
        export_dir = self.encoder.export(_logo(), ["android"], self.destination)
        android = export_dir / "android"

        for folder, size in [("mipmap-mdpi", 48), ("mipmap-hdpi", 72), ("mipmap-xhdpi", 96),
                             ("mipmap-xxhdpi", 144), ("mipmap-xxxhdpi", 192)]:
            self.assertEqual(_open_png(android / folder / "ic_launcher.png").size, (size, size))
        self.assertEqual(_open_png(android / "playstore-icon.png").size, (512, 512))

    def test_favicon_layout(self):
        encoder = ExportEncoder(options=ExportOptions(app_name="Acme", short_name="A"),
                                clock=_fixed_clock)

        export_dir = encoder.export(_logo(), ["favicon"], self.destination)
        favicon = export_dir / "favicon"

        for target in FAVICON_BUNDLE.targets:
            self.assertEqual(_open_png(favicon / target.filename).size,
                             (target.width, target.height))

        manifest = json.loads((favicon / "site.webmanifest").read_text())
        self.assertEqual(manifest["name"], "Acme")

        entries = read_icon_container((favicon / "favicon.ico").read_bytes())
        self.assertEqual([(e.width, e.height) for e in entries], [(16, 16), (32, 32), (48, 48)])

    def test_default_bundles_from_options(self):
        export_dir = self.encoder.export(_logo(), destination=self.destination)

        self.assertTrue((export_dir / "ios").is_dir())
        self.assertTrue((export_dir / "android").is_dir())
        self.assertFalse((export_dir / "favicon").exists())

    def test_progress_reporting(self):
        events = []

        self.encoder.export(_logo(), ["android", "favicon"], self.destination,
                            progress=events.append)

        total = 6 + 6
        self.assertTrue(all(event.total == total for event in events))
        self.assertEqual(events[0].completed, 0)
        self.assertEqual(events[0].current_bundle, ANDROID_BUNDLE)
        self.assertEqual(events[-1].completed, total)
        self.assertEqual(events[-1].current_bundle, FAVICON_BUNDLE)

        completed = [event.completed for event in events]
        self.assertEqual(completed, sorted(completed))

    def test_vector_bundle_writes_vectorizer_output(self):
        svg = b"<svg xmlns='http://www.w3.org/2000/svg'/>"
        calls = []

        def vectorizer(image):
            calls.append(image.size)
            return svg

        encoder = ExportEncoder(vectorizer=vectorizer, clock=_fixed_clock)
        export_dir = encoder.export(_logo(), ["svg"], self.destination)

        self.assertEqual((export_dir / "svg" / "logo.svg").read_bytes(), svg)
        self.assertEqual(calls, [(64, 64)])

    def test_vector_bundle_without_vectorizer_writes_nothing(self):
        with self.assertRaises(ValueError):
            self.encoder.export(_logo(), ["ios", "svg"], self.destination)

        self.assertEqual(list(self.destination.iterdir()), [])

    def test_vectorizer_must_return_bytes(self):
        encoder = ExportEncoder(vectorizer=lambda image: "<svg/>", clock=_fixed_clock)

        with self.assertRaises(TypeError):
            encoder.export(_logo(), ["svg"], self.destination)

    def test_unknown_bundle_name(self):
        with self.assertRaises(ValueError):
            self.encoder.export(_logo(), ["windows"], self.destination)

    def test_requires_raster_image(self):
        with self.assertRaises(TypeError):
            self.encoder.export(Image.new("RGBA", (8, 8)), ["ios"], self.destination)

    def test_write_failure_is_fail_fast(self):
        """The first failing write aborts; later bundles are never started."""
        # A file where the android bundle folder should go
        blocked = self.destination / "export-2024-03-05-140709"
        blocked.mkdir()
        (blocked / "android").write_bytes(b"not a directory")

        with self.assertRaises(ExportIOError) as context:
            self.encoder.export(_logo(), ["favicon", "android", "ios"], self.destination)

        self.assertEqual(context.exception.bundle, "android")
        self.assertEqual(context.exception.path, blocked / "android")
        self.assertIn("android", str(context.exception))
        self.assertIsInstance(context.exception, OSError)

        # Earlier bundle stays on disk, later bundle was not attempted
        self.assertTrue((blocked / "favicon" / "favicon.ico").is_file())
        self.assertFalse((blocked / "ios").exists())

    def test_encoding_failure_names_file(self):
        with patch("LF_Libs.ExportLib.export_encoder.encode_png",
                   side_effect=EncodingError("Failed to encode image as PNG: boom")):
            with self.assertRaises(EncodingError) as context:
                self.encoder.export(_logo(), ["android"], self.destination)

        self.assertEqual(context.exception.path.name, "ic_launcher.png")
        self.assertIn("android/mipmap-mdpi/ic_launcher.png", str(context.exception))

    def test_export_bundle_returns_written_paths(self):
        export_dir = self.destination / "manual"

        paths = self.encoder.export_bundle(ANDROID_BUNDLE, _logo(), export_dir)

        self.assertEqual(len(paths), 6)
        self.assertTrue(all(path.is_file() for path in paths))


class TestSourceImageUntouched(unittest.TestCase):
    """Exporting never modifies the source image."""

    def test_source_pixels_unchanged(self):
        image = _logo()
        before = image.to_array().copy()

        with tempfile.TemporaryDirectory() as temp_dir:
            ExportEncoder(clock=_fixed_clock).export(image, ["favicon"], temp_dir)

        self.assertTrue(np.array_equal(image.to_array(), before))


if __name__ == "__main__":
    unittest.main()
