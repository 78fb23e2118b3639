"""
Tests for the QR-bill composer.

Verifies that:
1. The bill renders the localized receipt and payment parts as vector content
2. Bills without amount or debtor get blank fields
3. Overflowing content raises LayoutOverflowError and draws nothing
4. generate_qr_bill_pdf writes a one-page PDF
"""
import dataclasses
import io
from unittest.mock import MagicMock, call

import fitz
import pytest
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate

from qrbill.errors import LayoutOverflowError, ValidationError
from qrbill.services.billing.qr_bill import QRBill, generate_qr_bill_pdf


def _page_text(pdf_bytes):
    doc = fitz.open(stream=pdf_bytes, filetype='pdf')
    try:
        assert len(doc) == 1
        page = doc[0]
        return page.get_text(), page.get_images(full=True), page.get_drawings()
    finally:
        doc.close()


class TestQRBillRendering:

    def test_german_bill(self, bill_data):
        text, images, drawings = _page_text(generate_qr_bill_pdf(bill_data))

        for literal in ('Empfangsschein', 'Zahlteil', 'Annahmestelle', 'Konto / Zahlbar an',
                        'Referenz', 'Zusätzliche Informationen', 'Zahlbar durch', 'Währung', 'Betrag'):
            assert literal in text
        assert '2 500.25' in text
        assert 'CH44 3199 9123 0008 8901 2' in text
        assert '21 00000 00003 13947 14300 09017' in text
        assert 'Auftrag vom 15.06.2020' in text
        assert 'Name AV1' in text
        assert 'Simon Muster' in text
        assert images == []
        assert len(drawings) > 0

    def test_bill_without_amount_and_debtor(self, minimal_data):
        text, images, _ = _page_text(generate_qr_bill_pdf(minimal_data))

        assert 'Payable by (name/address)' in text
        assert 'Receipt' in text
        assert 'Payment part' in text
        assert 'CHF' in text
        assert 'Reference' not in text
        assert images == []

    def test_zero_amount_is_a_notification(self, minimal_data):
        minimal_data.update(lang='fr', amount=0)
        text, _, _ = _page_text(generate_qr_bill_pdf(minimal_data))
        assert 'NE PAS UTILISER POUR LE PAIEMENT' in text
        assert '0.00' in text

    def test_scor_reference(self, minimal_data):
        minimal_data.update(reference_type='SCOR', reference='RF18539007547034')
        text, _, _ = _page_text(generate_qr_bill_pdf(minimal_data))
        assert 'RF18 5390 0754 7034' in text

    def test_output_path(self, bill_data, tmp_path):
        target = tmp_path / 'bill.pdf'
        pdf_bytes = generate_qr_bill_pdf(bill_data, output_path=str(target))
        assert pdf_bytes.startswith(b'%PDF')
        assert target.read_bytes() == pdf_bytes


class TestQRBillErrors:

    def test_invalid_data_fails_on_construction(self, minimal_data):
        minimal_data['currency'] = 'USD'
        with pytest.raises(ValidationError) as excinfo:
            QRBill(minimal_data)
        assert excinfo.value.field == 'currency'

    def test_overflow_draws_nothing(self, bill_data, pdf_canvas):
        bill = QRBill(bill_data)
        # bypasses validation to force an oversized additional information block
        bill.record = dataclasses.replace(bill.record, message='x' * 1400)
        c, buffer = pdf_canvas

        with pytest.raises(LayoutOverflowError) as excinfo:
            bill.render(c)
        assert excinfo.value.region == 'payment'

        c.showPage()
        c.save()
        text, images, drawings = _page_text(buffer.getvalue())
        assert text.strip() == ''
        assert drawings == []

    def test_overflow_with_mock_canvas(self, bill_data):
        bill = QRBill(bill_data)
        bill.record = dataclasses.replace(bill.record, message='x' * 1400)
        c = MagicMock()
        with pytest.raises(LayoutOverflowError):
            bill.render(c)
        assert not c.drawString.called
        assert not c.line.called


class TestQRBillFlowable:

    def test_fixed_size(self, bill_data):
        bill = QRBill(bill_data)
        assert bill.wrap(10, 10) == (210 * mm, 105 * mm)

    def test_separators(self):
        c = MagicMock()
        QRBill._draw_separators(c)

        assert call.setDash([2], 0) in c.mock_calls
        assert call.line(62 * mm, 0, 62 * mm, 105 * mm) in c.mock_calls
        assert call.line(0, 105 * mm, 210 * mm, 105 * mm) in c.mock_calls
        assert call.setFont('ZapfDingbats', 15) in c.mock_calls
        assert call.rotate(-90) in c.mock_calls
        assert c.mock_calls[-1] == call.restoreState()

    def test_render_fits_before_drawing_at_offset(self, bill_data, monkeypatch):
        draw_fitted = MagicMock()
        monkeypatch.setattr(QRBill, "_draw_fitted", draw_fitted)
        c = MagicMock()
        QRBill(bill_data).render(c, 0, 20)

        assert c.mock_calls == [call.saveState(), call.translate(0, 20), call.restoreState()]
        receipt, payment = draw_fitted.call_args[0][1]
        assert receipt.fit_successful and payment.fit_successful

    def test_inside_document(self, bill_data):
        buffer = io.BytesIO()
        # frames keep 6pt padding, so the page is wider than A4
        doc = SimpleDocTemplate(buffer, pagesize=(220 * mm, 297 * mm), leftMargin=0, rightMargin=0,
                                topMargin=0, bottomMargin=0)
        doc.build([QRBill(bill_data)])

        text, images, _ = _page_text(buffer.getvalue())
        assert 'Zahlteil' in text
        assert images == []
