"""
Tests for the built-in parameter packages in preset_core.packages.
"""

import os
import sys
import unittest

# Add project root directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import BaseModel, ValidationError  # noqa: E402

from preset_core.packages import (  # noqa: E402
    BaseParameterPackage,
    BorderParameterPackage,
    ControlParameterPackage,
    CropParameterPackage,
    DimensionalParameterPackage,
    PackageConfig,
    ReflectionParameterPackage,
    RoundedCornersParameterPackage,
    TextParameterPackage,
    TransformationalParameterPackage,
    WatermarkParameterPackage,
    _is_valid_parameter_package,
    forbid_unknown_keys,
    parse_dimension,
)
from preset_core.packages.base import check_range  # noqa: E402
from preset_core.packages.dimensional import Dimension  # noqa: E402


class RequiresSrcPackage(BaseParameterPackage[PackageConfig]):
    plugin_name = "requires_src"
    category = "control"

    def owned_parameters(self):
        return ["src"]

    def required_parameters(self):
        return ["src"]


class TestBaseParameterPackage(unittest.TestCase):
    def test_priority_override_and_enabled(self):
        package = DimensionalParameterPackage(PackageConfig(priority=99, enabled=False))
        self.assertEqual(package.priority(), 99)
        self.assertFalse(package.enabled)
        self.assertEqual(DimensionalParameterPackage().priority(), 20)

    def test_package_config_rejects_unknown_keys(self):
        with self.assertRaises(ValidationError):
            PackageConfig(colour="red")

    def test_plugin_config_rejects_unknown_keys(self):
        @forbid_unknown_keys
        class WatermarkSettings(BaseModel):
            opacity: int = 50

        class TintedConfig(PackageConfig):
            tint: str = "none"

        self.assertEqual(WatermarkSettings(opacity=20).opacity, 20)
        for config_type, extra in ((WatermarkSettings, "colour"), (TintedConfig, "shade")):
            with self.subTest(config_type=config_type.__name__):
                with self.assertRaises(ValidationError):
                    config_type(**{extra: "red"})

    def test_wrong_config_type(self):
        with self.assertRaises(TypeError):
            DimensionalParameterPackage({"priority": 3})

    def test_required_parameters(self):
        package = RequiresSrcPackage()
        self.assertEqual(
            package.validate_parameters({}), {"src": "Required parameter 'src' is missing"}
        )
        self.assertEqual(package.validate_parameters({"src": "a.jpg"}), {})

    def test_blank_values_are_skipped(self):
        package = DimensionalParameterPackage()
        self.assertEqual(package.validate_parameters({"width": "", "height": 0}), {})

    def test_get_info(self):
        info = CropParameterPackage().get_info()
        self.assertEqual(info["plugin_name"], "crop")
        self.assertEqual(info["category"], "transformational")
        self.assertEqual(info["priority"], 19)
        self.assertEqual(info["parameters"], 1)
        self.assertEqual(info["class"], "CropParameterPackage")

    def test_parameter_documentation(self):
        docs = DimensionalParameterPackage().get_parameter_documentation()
        self.assertEqual(docs["max_width"], "docs/parameters.md#max-width")

    def test_is_valid_parameter_package(self):
        self.assertTrue(_is_valid_parameter_package(TextParameterPackage))
        self.assertFalse(_is_valid_parameter_package(BaseParameterPackage))
        self.assertFalse(_is_valid_parameter_package(object))
        self.assertFalse(_is_valid_parameter_package("text"))

    def test_check_range(self):
        self.assertIsNone(check_range("50", 0, 100, "Opacity"))
        self.assertEqual(
            check_range("150", 0, 100, "Opacity", found=True),
            "Opacity must be a number between 0 and 100. Found: 150",
        )


class TestControlParameterPackage(unittest.TestCase):
    def setUp(self):
        self.package = ControlParameterPackage()

    def test_owned_parameters(self):
        owned = self.package.owned_parameters()
        for name in ("src", "cache", "cache_custom", "save_as", "filename"):
            self.assertIn(name, owned)
        self.assertNotIn("width", owned)

    def test_cache_durations(self):
        self.assertEqual(self.package.validate_parameters({"cache": "2 weeks"}), {})
        self.assertEqual(self.package.validate_parameters({"cache": "-1"}), {})
        self.assertEqual(self.package.validate_parameters({"cache": "forever"}), {})
        errors = self.package.validate_parameters({"cache": "banana"})
        self.assertIn("Could not parse 'banana'", errors["cache"])
        errors = self.package.validate_parameters({"cache": "-5"})
        self.assertIn("cache", errors)

    def test_custom_cache(self):
        self.assertEqual(
            self.package.validate_parameters({"cache": "custom", "cache_custom": "1 day"}),
            {},
        )
        errors = self.package.validate_parameters(
            {"cache": "Custom", "cache_custom": "whenever"}
        )
        self.assertEqual(list(errors), ["cache_custom"])
        errors = self.package.validate_parameters({"cache": "custom"})
        self.assertEqual(errors["cache_custom"], "Duration cannot be empty")

    def test_empty_src(self):
        self.assertEqual(
            self.package.validate_parameters({"src": ""}), {"src": "Source image is required"}
        )
        self.assertEqual(
            self.package.validate_parameters({"src": "  "}), {"src": "Source image is required"}
        )
        self.assertEqual(self.package.validate_parameters({"src": "/img/a.jpg"}), {})

    def test_enumerations(self):
        self.assertEqual(
            self.package.validate_parameters(
                {"output": "url", "save_type": "webp", "lazy": "lqip", "url_only": "true"}
            ),
            {},
        )
        errors = self.package.validate_parameters(
            {"output": "fax", "save_as": "tiff", "lazy": "eager", "url_only": "maybe"}
        )
        self.assertTrue(errors["output"].startswith("Invalid output method"))
        self.assertTrue(errors["save_as"].startswith("Invalid image format"))
        self.assertTrue(errors["lazy"].startswith("Invalid lazy loading method"))
        self.assertIn("true/false", errors["url_only"])

    def test_boolean_and_string_parameters(self):
        errors = self.package.validate_parameters(
            {"hash_filename": "perhaps", "add_dims": "y", "sizes": 5}
        )
        self.assertEqual(
            errors,
            {
                "hash_filename": "Invalid value for hash_filename. Use yes/no, y/n, 1/0",
                "sizes": "Sizes must be a string",
            },
        )

    def test_filename_separators(self):
        errors = self.package.validate_parameters({"filename": "a/b", "filename_suffix": "_x"})
        self.assertEqual(
            errors, {"filename": "Filename cannot contain path separators (/ or \\)"}
        )

    def test_palette_size(self):
        self.assertEqual(self.package.validate_parameters({"palette_size": "8"}), {})
        for value in ("1", "2.5", "lots"):
            with self.subTest(value=value):
                self.assertIn(
                    "palette_size", self.package.validate_parameters({"palette_size": value})
                )

    def test_non_finite_numbers_are_rejected(self):
        errors = self.package.validate_parameters(
            {"palette_size": float("inf"), "cache": float("inf"), "output": "tag"}
        )
        self.assertEqual(sorted(errors), ["cache", "palette_size"])
        errors = self.package.validate_parameters({"cache": "1" + "0" * 400 + " hours"})
        self.assertIn("Could not parse", errors["cache"])


class TestDimensionalParameterPackage(unittest.TestCase):
    def setUp(self):
        self.package = DimensionalParameterPackage()

    def test_parse_dimension(self):
        self.assertEqual(parse_dimension("250px"), Dimension(250, False))
        self.assertEqual(parse_dimension("50%"), Dimension(50, True))
        self.assertEqual(parse_dimension(300), Dimension(300, False))
        for value in ("abc", "12.5", "-5", "20000", "1500%", True, float("inf"), "1e400px"):
            with self.subTest(value=value):
                self.assertIsNone(parse_dimension(value))

    def test_invalid_width(self):
        self.assertEqual(
            self.package.validate_parameters({"width": "abc"}),
            {"width": "'width' must be a positive integer (got: abc)"},
        )

    def test_min_greater_than_max(self):
        errors = self.package.validate_parameters({"min_width": 500, "max_width": 300})
        self.assertEqual(
            errors,
            {"min_width": "Minimum width (500) cannot be greater than maximum width (300)"},
        )
        self.assertEqual(
            self.package.validate_parameters({"min_height": "100", "max_height": "200px"}), {}
        )

    def test_percentages_are_not_compared(self):
        self.assertEqual(
            self.package.validate_parameters({"min_width": "90%", "max_width": 10}), {}
        )


class TestTransformationalParameterPackage(unittest.TestCase):
    def setUp(self):
        self.package = TransformationalParameterPackage()

    def test_owned_parameters(self):
        owned = self.package.owned_parameters()
        self.assertIn("background", owned)
        self.assertIn("quality", owned)
        self.assertNotIn("crop", owned)
        self.assertNotIn("watermark", owned)

    def test_valid_values(self):
        params = {
            "rotate": "-90",
            "quality": "lossless",
            "png_quality": 9,
            "brightness": "-100",
            "hue": 360,
            "bg_color": "#ffffff",
            "background": "transparent",
            "allow_scale_larger": "yes",
            "flip": "hv",
            "blur": "1.5",
            "interlace": "y",
        }
        self.assertEqual(self.package.validate_parameters(params), {})

    def test_invalid_values(self):
        errors = self.package.validate_parameters(
            {
                "rotate": 400,
                "quality": 101,
                "bg_color": "#zzz",
                "flip": "diagonal",
                "blur": "-1",
                "pixelate": "abc",
                "preload": "maybe",
            }
        )
        self.assertEqual(errors["rotate"], "Rotation must be between -360 and 360 degrees")
        self.assertEqual(errors["quality"], 'Quality must be an integer between 0-100 or "lossless"')
        self.assertIn("valid color", errors["bg_color"])
        self.assertIn("horizontal, vertical, both", errors["flip"])
        self.assertEqual(errors["blur"], "Blur radius must be a positive number")
        self.assertEqual(errors["pixelate"], "Pixelate size must be a positive integer")
        self.assertEqual(errors["preload"], "Invalid value for preload. Use yes/no, y/n, 1/0")

    def test_non_finite_numbers_are_rejected(self):
        inf = float("inf")
        errors = self.package.validate_parameters(
            {"pixelate": inf, "blur": inf, "rotate": float("nan"), "sharpen": "1e400"}
        )
        self.assertEqual(sorted(errors), ["blur", "pixelate", "rotate", "sharpen"])


class TestCropParameterPackage(unittest.TestCase):
    def setUp(self):
        self.package = CropParameterPackage()

    def check(self, value):
        return self.package.validate_parameters({"crop": value}).get("crop")

    def test_valid(self):
        for value in ("yes", "no", "none", "y|center", "yes|center,top|0,10px|yes",
                      "face_detect|face_detect,face_detect|-5.5%"):
            with self.subTest(value=value):
                self.assertIsNone(self.check(value))

    def test_invalid(self):
        self.assertEqual(
            self.check("maybe"),
            "Invalid crop mode 'maybe'. Must be 'yes', 'no', or 'face_detect'",
        )
        self.assertIn("Invalid crop position 'middle'", self.check("yes|middle"))
        self.assertIn("Invalid crop position format", self.check("yes|a,b,c"))
        self.assertIn(
            "Invalid vertical crop position 'sideways'", self.check("yes|center,sideways")
        )
        self.assertIn("Invalid crop offset 'abc'", self.check("yes|center|abc"))
        self.assertIn("Invalid vertical crop offset 'x'", self.check("yes|center|0,x"))
        self.assertEqual(
            self.check("yes|center|0,0|maybe"),
            "Invalid smart scaling value 'maybe'. Must be 'yes' or 'no'",
        )


class TestTextParameterPackage(unittest.TestCase):
    def setUp(self):
        self.package = TextParameterPackage()

    def check(self, value):
        return self.package.validate_parameters({"text": value}).get("text")

    def test_valid(self):
        self.assertIsNone(self.check("Hello World"))
        self.assertIsNone(self.check("Hi" + "|" * 6 + "center" + "|" * 2 + "left,top"))

    def test_missing_text(self):
        self.assertIn("requires text content", self.check("|24|#fff"))

    def test_alignment(self):
        self.assertEqual(
            self.check("Hi" + "|" * 6 + "middle"),
            "Text alignment must be one of: left, center, right. Found: middle",
        )

    def test_position(self):
        self.assertEqual(
            self.check("Hi" + "|" * 8 + "center,middle"),
            "Text vertical position must be one of: top, center, bottom. Found: middle",
        )

    def test_opacity_and_rotation(self):
        self.assertEqual(
            self.check("Hi" + "|" * 10 + "150"),
            "Text opacity must be a number between 0 and 100. Found: 150",
        )
        self.assertEqual(
            self.check("Hi" + "|" * 13 + "-1"),
            "Shadow opacity must be a number between 0 and 100. Found: -1",
        )
        self.assertEqual(
            self.check("Hi" + "|" * 16 + "abc"),
            "Text rotation must be a number (degrees). Found: abc",
        )


class TestWatermarkParameterPackage(unittest.TestCase):
    def setUp(self):
        self.package = WatermarkParameterPackage()

    def check(self, value):
        return self.package.validate_parameters({"watermark": value}).get("watermark")

    def test_valid(self):
        self.assertIsNone(self.check("/img/wm.png|0,0|right,bottom|50|100|45"))

    def test_invalid(self):
        self.assertIn("requires a source image path", self.check("|0,0"))
        self.assertEqual(
            self.check("wm.png||left,middle"),
            "Watermark vertical position must be one of: top, center, bottom. Found: middle",
        )
        self.assertEqual(
            self.check("wm.png|||150"),
            "Watermark opacity must be a number between 0 and 100. Found: 150",
        )
        self.assertEqual(
            self.check("wm.png|||||x"),
            "Watermark rotation must be a number (degrees). Found: x",
        )


class TestBorderParameterPackage(unittest.TestCase):
    def setUp(self):
        self.package = BorderParameterPackage()

    def check(self, value):
        return self.package.validate_parameters({"border": value}).get("border")

    def test_valid(self):
        for value in ("10px|#000000", "10", "5%|#abcd", "5|rgba(0,0,0,0.5)", "2|rgb(1,2,3)"):
            with self.subTest(value=value):
                self.assertIsNone(self.check(value))

    def test_invalid(self):
        self.assertIn("requires a width value", self.check("|#000"))
        self.assertIn("Found: thick", self.check("thick|#000"))
        self.assertIn("Found: notacolor", self.check("10px|notacolor"))


class TestRoundedCornersParameterPackage(unittest.TestCase):
    def setUp(self):
        self.package = RoundedCornersParameterPackage()

    def check(self, value):
        return self.package.validate_parameters({"rounded_corners": value}).get(
            "rounded_corners"
        )

    def test_valid(self):
        for value in ("all,20", "tl,10px|br,10px,#ffffff", "tr,5%,#000"):
            with self.subTest(value=value):
                self.assertIsNone(self.check(value))

    def test_invalid(self):
        self.assertIn('format "corner,radius"', self.check("all"))
        self.assertEqual(
            self.check("middle,10"),
            "Corner identifier must be one of: all, tl, tr, bl, br. Found: middle",
        )
        self.assertIn("Found: big", self.check("all,big"))
        self.assertIn("Found: #ffff", self.check("all,10,#ffff"))


class TestReflectionParameterPackage(unittest.TestCase):
    def setUp(self):
        self.package = ReflectionParameterPackage()

    def check(self, value):
        return self.package.validate_parameters({"reflection": value}).get("reflection")

    def test_valid(self):
        self.assertIsNone(self.check("0,80,0,50%"))
        self.assertIsNone(self.check("10px"))

    def test_invalid(self):
        self.assertIn("requires a gap value", self.check(",80"))
        self.assertIn("Found: 5em", self.check("5em,80"))
        self.assertEqual(
            self.check("0,150"),
            "Reflection start opacity must be a number between 0 and 100. Found: 150",
        )
        self.assertIn("Found: tall", self.check("0,80,0,tall"))


if __name__ == "__main__":
    unittest.main()
