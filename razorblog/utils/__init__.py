# razorblog/utils/__init__.py
"""
Helpers shared across the API packages.
"""

from .datetime_utils import (
    DateTimeUtils,
    now,
    for_firestore, from_firestore
)
from .ids import new_id, is_valid_id, require_valid_id, validate_id_field

__all__ = [
    'DateTimeUtils',
    'now',
    'for_firestore', 'from_firestore',
    'new_id', 'is_valid_id', 'require_valid_id', 'validate_id_field'
]
