"""
Tests for font registration, text styles and bill graphics.
"""
from unittest.mock import MagicMock, call

import pytest
from reportlab.lib.units import mm

from qrbill.errors import ConfigurationError
from qrbill.services.billing import layout_utils
from qrbill.services.billing.layout_utils import (
    BillStyles,
    TextStyle,
    draw_swiss_cross,
    format_address,
    paragraph_style,
)
from qrbill.services.billing.records import Address


@pytest.fixture
def unregistered_fonts(monkeypatch):
    monkeypatch.setattr(layout_utils, "_fonts_registered", False)
    monkeypatch.setattr(layout_utils, "FONT_REGULAR", "Helvetica")
    monkeypatch.setattr(layout_utils, "FONT_BOLD", "Helvetica-Bold")
    monkeypatch.setattr(layout_utils.config, "FONT_REGULAR_PATH", "/nonexistent/Regular.ttf")
    monkeypatch.setattr(layout_utils.config, "FONT_BOLD_PATH", "/nonexistent/Bold.ttf")


class TestRegisterFonts:

    def test_falls_back_to_helvetica(self, unregistered_fonts, monkeypatch, caplog):
        monkeypatch.setattr(layout_utils.config, "REQUIRE_FONTS", False)
        assert layout_utils.register_fonts() == ("Helvetica", "Helvetica-Bold")
        assert "using Helvetica" in caplog.text

    def test_required_fonts_missing(self, unregistered_fonts, monkeypatch):
        monkeypatch.setattr(layout_utils.config, "REQUIRE_FONTS", True)
        with pytest.raises(ConfigurationError, match="/nonexistent/Regular.ttf"):
            layout_utils.register_fonts()

    def test_registration_happens_once(self, unregistered_fonts, monkeypatch):
        monkeypatch.setattr(layout_utils.config, "REQUIRE_FONTS", False)
        layout_utils.register_fonts()
        monkeypatch.setattr(layout_utils.config, "REQUIRE_FONTS", True)
        assert layout_utils.register_fonts() == ("Helvetica", "Helvetica-Bold")


class TestStyles:

    def test_style_guide_defaults(self):
        styles = BillStyles()
        assert styles.payment_value == TextStyle(False, 10, 11)
        assert styles.receipt_heading == TextStyle(True, 6, 9)

    def test_paragraph_style(self, unregistered_fonts):
        style = paragraph_style("heading", TextStyle(True, 8, 11), space_after=3)
        assert style.fontName == "Helvetica-Bold"
        assert style.fontSize == 8
        assert style.leading == 11
        assert style.spaceAfter == 3


class TestFormatAddress:

    def test_structured(self):
        address = Address(name="Max Muster & Söhne", country="CH", address_line1="Musterstrasse",
                          address_line2="123", postal_code="8000", town="Seldwyla")
        assert format_address(address) == "Max Muster & Söhne\nMusterstrasse 123\nCH-8000 Seldwyla"

    def test_structured_without_street(self):
        address = Address(name="Pia Rutschmann", country="CH", postal_code="9490", town="Vaduz")
        assert format_address(address) == "Pia Rutschmann\nCH-9490 Vaduz"

    def test_combined(self):
        address = Address(name="Simon Muster", country="CH", address_type="combined",
                          address_line1="Musterstrasse 1", address_line2="8000 Seldwyla")
        assert format_address(address) == "Simon Muster\nMusterstrasse 1\nCH-8000 Seldwyla"


def test_swiss_cross():
    c = MagicMock()
    path = c.beginPath.return_value
    draw_swiss_cross(c, 10, 20)

    assert c.mock_calls[:2] == [call.saveState(), call.translate(10, 20)]
    assert call.rect(0, 0, 7 * mm, 7 * mm, stroke=0, fill=1) in c.mock_calls
    assert call.rect(0.5 * mm, 0.5 * mm, 6 * mm, 6 * mm, stroke=0, fill=1) in c.mock_calls
    assert path.rect.call_count == 2
    c.drawPath.assert_called_once_with(path, stroke=0, fill=1)
    assert c.mock_calls[-1] == call.restoreState()
