"""Unit tests for identifier generation."""

import re
import uuid
from unittest.mock import patch

import pytest

from informes_rss.errors import EntropyError
from informes_rss.identifiers import generate_identifier


class TestGenerateIdentifier:
    """Unit tests for generate_identifier()."""

    def test_format_is_32_lowercase_hex(self):
        identifier = generate_identifier()

        assert re.fullmatch(r"[0-9a-f]{32}", identifier)

    def test_version_and_variant_bits(self):
        """Byte 6 carries version 4 and byte 8 the 10xxxxxx variant."""
        raw = bytes.fromhex(generate_identifier())

        assert raw[6] >> 4 == 4
        assert raw[8] >> 6 == 0b10

    def test_identifiers_are_unique(self):
        identifiers = {generate_identifier() for _ in range(1000)}

        assert len(identifiers) == 1000

    def test_uses_random_source(self):
        with patch("informes_rss.identifiers.uuid.uuid4") as mock_uuid4:
            raw = b"\x00" * 6 + b"\x40\x00\x80" + b"\x00" * 7
            mock_uuid4.return_value = uuid.UUID(bytes=raw)

            assert generate_identifier() == "00000000000040008000000000000000"

    @pytest.mark.parametrize("error", [NotImplementedError("no urandom"), OSError("EIO")])
    def test_entropy_failure_raises(self, error):
        with patch("informes_rss.identifiers.uuid.uuid4", side_effect=error):
            with pytest.raises(EntropyError):
                generate_identifier()
