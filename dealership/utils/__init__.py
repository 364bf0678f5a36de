"""Utility functions."""

from dealership.utils.encryption import FieldCipher, derive_fernet_key
from dealership.utils.money import format_currency, to_money

__all__ = [
    "FieldCipher",
    "derive_fernet_key",
    "format_currency",
    "to_money",
]
