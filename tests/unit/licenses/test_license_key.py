"""
Unit tests for license key generation.
"""
import re

import pytest

from licenses.domain.license_key import (
    KEY_PATTERN,
    LicenseKeyGenerator,
    generate_license_key,
    is_well_formed_key,
    normalize_license_key,
)

FOUR_BY_FOUR = re.compile(r"^[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")


class TestLicenseKeyGenerator:
    """Tests for license key generation."""

    def test_generated_key_format(self):
        key = generate_license_key()
        assert FOUR_BY_FOUR.match(key)
        assert KEY_PATTERN.match(key)

    def test_many_keys_match_pattern_and_are_unique(self):
        """100k keys all match the pattern and never repeat."""
        generator = LicenseKeyGenerator()
        keys = [generator.generate() for _ in range(100_000)]

        assert all(FOUR_BY_FOUR.match(key) for key in keys)
        assert len(set(keys)) == len(keys)

    def test_five_character_segments(self):
        key = LicenseKeyGenerator(segment_length=5).generate()
        assert re.match(r"^[A-Z0-9]{5}(-[A-Z0-9]{5}){3}$", key)
        assert KEY_PATTERN.match(key)

    @pytest.mark.parametrize("length", [0, 3, 6])
    def test_unsupported_segment_length(self, length):
        with pytest.raises(ValueError, match="segment length"):
            LicenseKeyGenerator(segment_length=length)


class TestNormalizeLicenseKey:
    """Tests for normalize_license_key."""

    def test_trims_and_upper_cases(self):
        assert normalize_license_key("  ab12-cd34-ef56-gh78 \n") == "AB12-CD34-EF56-GH78"

    def test_empty_and_none(self):
        assert normalize_license_key("") == ""
        assert normalize_license_key(None) == ""


class TestIsWellFormedKey:
    """Tests for is_well_formed_key."""

    @pytest.mark.parametrize("key", ["AB12-CD34-EF56-GH78", "AB12C-CD34D-EF56E-GH78F"])
    def test_generated_shapes(self, key):
        assert is_well_formed_key(key) is True

    @pytest.mark.parametrize(
        "key", ["", "AB12-CD34-EF56", "ab12-cd34-ef56-gh78", "AB12-CD34-EF56-GH78-IJ90", "AB12_CD34_EF56_GH78"]
    )
    def test_rejects_other_shapes(self, key):
        assert is_well_formed_key(key) is False
