"""
Custom Validators
=================

Custom validation functions untuk business rules
"""

from datetime import date
from decimal import Decimal
import re

ITEM_CODE_PATTERN = re.compile(r'^[A-Za-z0-9\-_./ ]{1,50}$')


def validate_master_code(value: str) -> str:
    """Validate kode master data (currency, customer, supplier, uom)"""
    if not value or not re.match(r'^[A-Za-z0-9\-_.]{1,50}$', value):
        raise ValueError('Code must be 1-50 characters: letters, digits, "-", "_" or "."')
    return value.upper()


def validate_company_code(value: int) -> int:
    """Company code wajib bilangan positif"""
    if value is None or value <= 0:
        raise ValueError('Company code must be a positive integer')
    return value


def validate_npwp(value: str) -> str:
    """NPWP: 15 atau 16 digit, tanda baca diabaikan"""
    if value is None:
        return value
    digits = re.sub(r'[.\-\s]', '', value)
    if not digits.isdigit() or len(digits) not in (15, 16):
        raise ValueError('NPWP must contain 15 or 16 digits')
    return digits


def validate_item_code(value: str) -> str:
    if not ITEM_CODE_PATTERN.match(value or ''):
        raise ValueError('Item code must be 1-50 characters')
    return value


def validate_non_negative_number(value: Decimal) -> Decimal:
    """Validate non-negative number"""
    if value is not None and value < 0:
        raise ValueError('Value must be non-negative')
    return value


def validate_positive_number(value: Decimal) -> Decimal:
    """Validate positive number"""
    if value is not None and value <= 0:
        raise ValueError('Value must be positive')
    return value


def validate_date_range(start_date: date, end_date: date) -> None:
    """Validate start_date <= end_date"""
    if start_date and end_date and start_date > end_date:
        raise ValueError('start_date must be before or equal to end_date')
