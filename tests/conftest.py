"""
Pytest fixtures for qrbill tests.

Provides sample payment data and canvases for rendering tests.
"""
import io
import os

import pytest

# Set test environment before importing qrbill.config
os.environ['QRBILL_STAGE'] = 'test'
os.environ.setdefault('QRBILL_REQUIRE_FONTS', 'false')


@pytest.fixture
def creditor():
    return {
        'iban': 'CH44 3199 9123 0008 8901 2',
        'name': 'Max Muster & Söhne',
        'address_line1': 'Musterstrasse',
        'address_line2': '123',
        'postal_code': '8000',
        'town': 'Seldwyla',
        'country': 'CH',
    }


@pytest.fixture
def debtor():
    return {
        'address_type': 'combined',
        'name': 'Simon Muster',
        'address_line1': 'Musterstrasse 1',
        'address_line2': '8000 Seldwyla',
        'country': 'CH',
    }


@pytest.fixture
def bill_data(creditor, debtor):
    """Complete QR-bill data (German, QRR reference, with debtor)."""
    return {
        'lang': 'de',
        'creditor': creditor,
        'debtor': debtor,
        'amount': 2500.25,
        'currency': 'CHF',
        'reference_type': 'QRR',
        'reference': '21 00000 00003 13947 14300 0901',
        'message': 'Auftrag vom 15.06.2020',
        'billing_information': '//S1/10/10201409/11/200701/20/140.000-53/30/102673831/31/200615/32/7.7/33/7.7:2.20',
        'alternative_schemes': ['Name AV1: UV;UltraPay005;12345', 'Name AV2: XY;XYService;54321'],
    }


@pytest.fixture
def minimal_data(creditor):
    """Smallest valid data: creditor and currency only."""
    return {'creditor': creditor, 'currency': 'CHF'}


@pytest.fixture
def pdf_canvas():
    """A real ReportLab canvas writing into memory; returns (canvas, buffer)."""
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen import canvas

    buffer = io.BytesIO()
    return canvas.Canvas(buffer, pagesize=A4), buffer
