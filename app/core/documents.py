"""
Document Utilities

Validation and formatting for Brazilian national IDs (CPF and CNPJ).
"""

from typing import List, Sequence


CNPJ_WEIGHTS_FIRST = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_WEIGHTS_SECOND = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


def _digits(value: str) -> List[int]:
    return [int(c) for c in value if c.isdigit()]


def _check_digit(digits: Sequence[int], weights: Sequence[int]) -> int:
    remainder = sum(d * w for d, w in zip(digits, weights)) % 11
    return 0 if remainder < 2 else 11 - remainder


def validate_cpf(cpf: str) -> bool:
    """Check a CPF's length and both check digits. Punctuation is ignored."""
    digits = _digits(cpf)
    if len(digits) != 11 or len(set(digits)) == 1:
        return False

    first = _check_digit(digits[:9], range(10, 1, -1))
    second = _check_digit(digits[:10], range(11, 1, -1))
    return digits[9] == first and digits[10] == second


def validate_cnpj(cnpj: str) -> bool:
    """Check a CNPJ's length and both check digits. Punctuation is ignored."""
    digits = _digits(cnpj)
    if len(digits) != 14 or len(set(digits)) == 1:
        return False

    first = _check_digit(digits[:12], CNPJ_WEIGHTS_FIRST)
    second = _check_digit(digits[:12] + [first], CNPJ_WEIGHTS_SECOND)
    return digits[12] == first and digits[13] == second


def format_cpf(cpf: str) -> str:
    """
    Format a CPF as 000.000.000-00.

    Raises:
        ValueError: If the value does not hold exactly 11 digits.
    """
    digits = "".join(c for c in cpf if c.isdigit())
    if len(digits) != 11:
        raise ValueError("Invalid CPF length")
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_cnpj(cnpj: str) -> str:
    """
    Format a CNPJ as 00.000.000/0000-00.

    Raises:
        ValueError: If the value does not hold exactly 14 digits.
    """
    digits = "".join(c for c in cnpj if c.isdigit())
    if len(digits) != 14:
        raise ValueError("Invalid CNPJ length")
    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"


def format_document(document: str) -> str:
    """
    Validate and format a document as CPF, falling back to CNPJ.

    Raises:
        ValueError: If the document is neither a valid CPF nor a valid CNPJ.
    """
    if validate_cpf(document):
        return format_cpf(document)
    if validate_cnpj(document):
        return format_cnpj(document)
    raise ValueError("Invalid document")
