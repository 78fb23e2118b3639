"""
Tests for QRR / SCOR / IBAN check digit algorithms.
"""
import pytest

from qrbill.errors import ChecksumError, FormatError
from qrbill.services.billing.checksums import (
    mod97,
    normalize_iban,
    normalize_qrr_reference,
    qrr_check_digit,
    validate_scor_reference,
)


class TestQRRReference:
    """Recursive modulo 10 check digit."""

    def test_computes_check_digit(self):
        assert qrr_check_digit('21000000000313947143000901') == 7

    def test_appends_check_digit_to_26_digits(self):
        assert normalize_qrr_reference('21000000000313947143000901') == '210000000003139471430009017'

    def test_accepts_valid_27_digits_with_whitespace(self):
        assert normalize_qrr_reference('210000000 0031394 71430009017') == '210000000003139471430009017'

    def test_validation_is_idempotent(self):
        normalized = normalize_qrr_reference('21000000000313947143000901')
        assert normalize_qrr_reference(normalized) == normalized

    def test_wrong_check_digit_names_expected_digit(self):
        with pytest.raises(ChecksumError, match='should be 7'):
            normalize_qrr_reference('210000000003139471430009011')

    @pytest.mark.parametrize('value', ['1234', '2100000000031394714300090177', '21000000000313947143000A01', ''])
    def test_rejects_wrong_shape(self, value):
        with pytest.raises(FormatError, match='26 or 27 digits'):
            normalize_qrr_reference(value)

    def test_detects_most_single_digit_corruptions(self):
        """The table detects every single-digit substitution of this reference."""
        reference = '21000000000313947143000901'
        check_digit = qrr_check_digit(reference)
        detected = total = 0
        for position in range(len(reference)):
            for digit in '0123456789':
                if digit == reference[position]:
                    continue
                corrupted = reference[:position] + digit + reference[position + 1:]
                total += 1
                detected += qrr_check_digit(corrupted) != check_digit
        assert detected / total >= 0.9


class TestSCORReference:
    """ISO 11649 creditor reference."""

    def test_valid_reference(self):
        assert validate_scor_reference('RF 48 5000056789012345') == 'RF485000056789012345'

    def test_mod97_of_rearranged_reference_is_one(self):
        value = 'RF485000056789012345'
        assert mod97(value[4:] + value[:4]) == 1

    @pytest.mark.parametrize('value', ['RF11', 'RFa' * 9, 'RF123323;ö'])
    def test_length_and_characters_are_checked_first(self, value):
        with pytest.raises(FormatError, match='between 5 and 25 alpha-numeric'):
            validate_scor_reference(value)

    @pytest.mark.parametrize('value', ['a' * 20, 'RFabcdefgh'])
    def test_must_start_with_rf_and_check_digits(self, value):
        with pytest.raises(FormatError, match='must start with RF and check digits'):
            validate_scor_reference(value)

    def test_invalid_check_digits(self):
        with pytest.raises(ChecksumError, match='invalid check digits'):
            validate_scor_reference('RF 48 5000056789012345d')

    def test_any_single_character_change_fails(self):
        reference = 'RF485000056789012345'
        for position in range(4, len(reference)):
            replacement = '1' if reference[position] != '1' else '2'
            corrupted = reference[:position] + replacement + reference[position + 1:]
            with pytest.raises(ChecksumError):
                validate_scor_reference(corrupted)


class TestIBAN:
    """CH/LI IBAN validation."""

    def test_valid_iban_is_compacted_and_upper_cased(self):
        assert normalize_iban('ch44 3199 9123 0008 8901 2') == 'CH4431999123000889012'

    def test_wrong_length(self):
        with pytest.raises(FormatError, match='exactly 21'):
            normalize_iban('CH44 319 39912300088901 2')

    def test_foreign_country(self):
        with pytest.raises(FormatError, match='CH or LI'):
            normalize_iban('DE443199912300088901X')

    def test_bad_checksum(self):
        with pytest.raises(ChecksumError, match='invalid check digits'):
            normalize_iban('CH4431999123000889013')
