#!/usr/bin/env python3
"""
Render Sample QR-bills for Visual QA.

Writes one PDF per sample (with amount, without amount and debtor, SCOR
reference, zero-amount notification) to the output directory.

Usage:
    python scripts/render_sample_bill.py
    python scripts/render_sample_bill.py --lang fr --output-dir /tmp/bills
"""
import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from qrbill import config
from qrbill.errors import QRBillError
from qrbill.services.billing.qr_bill import generate_qr_bill_pdf
from qrbill.utils.logger import setup_logger

logger = logging.getLogger("qrbill.scripts.render_sample_bill")

CREDITOR = {
    'iban': 'CH44 3199 9123 0008 8901 2',
    'name': 'Max Muster & Söhne',
    'address_line1': 'Musterstrasse',
    'address_line2': '123',
    'postal_code': '8000',
    'town': 'Seldwyla',
    'country': 'CH',
}

DEBTOR = {
    'name': 'Simon Muster',
    'address_line1': 'Musterstrasse',
    'address_line2': '1',
    'postal_code': '8000',
    'town': 'Seldwyla',
    'country': 'CH',
}

SAMPLES = {
    'qrr_with_amount': {
        'creditor': CREDITOR,
        'debtor': DEBTOR,
        'amount': 2500.25,
        'currency': 'CHF',
        'reference_type': 'QRR',
        'reference': '21 00000 00003 13947 14300 0901',
        'message': 'Auftrag vom 15.06.2020',
        'billing_information': '//S1/10/10201409/11/200701/20/140.000-53/30/102673831/31/200615/32/7.7/33/7.7:2.20',
        'alternative_schemes': ['Name AV1: UV;UltraPay005;12345', 'Name AV2: XY;XYService;54321'],
    },
    'blank_amount_and_debtor': {
        'creditor': CREDITOR,
        'currency': 'CHF',
    },
    'scor_reference': {
        'creditor': CREDITOR,
        'debtor': DEBTOR,
        'amount': 199.95,
        'currency': 'EUR',
        'reference_type': 'SCOR',
        'reference': 'RF18 5390 0754 7034',
    },
    'notification': {
        'creditor': CREDITOR,
        'debtor': DEBTOR,
        'amount': 0,
        'currency': 'CHF',
    },
}


def render_samples(output_dir, lang):
    """Render every sample bill; returns the number of failures."""
    os.makedirs(output_dir, exist_ok=True)
    failures = 0
    for name, data in SAMPLES.items():
        path = os.path.join(output_dir, f"{name}_{lang}.pdf")
        try:
            generate_qr_bill_pdf(dict(data, lang=lang), output_path=path)
        except QRBillError as e:
            failures += 1
            logger.error(f"[Samples] {name}: {e}")
        else:
            print(f"  OK {path}")
    return failures


def main():
    parser = argparse.ArgumentParser(description="Render sample QR-bills")
    parser.add_argument("--output-dir", default=os.path.join(config.BASE_DIR, "generated", "samples"),
                        help="Directory the PDFs are written to")
    parser.add_argument("--lang", choices=["en", "de", "fr", "it"], default=config.DEFAULT_LANG,
                        help="Language of the bill texts")
    args = parser.parse_args()

    setup_logger(config.LOG_LEVEL, json_format=config.LOG_JSON)
    failures = render_samples(args.output_dir, args.lang)
    if failures:
        print(f"{failures} sample(s) failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
