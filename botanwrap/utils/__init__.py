"""
Utility functions for botanwrap.
"""

from .encoding import hex_encode, hex_decode, pkcs_hash_id
from .memory import const_time_compare, scrub_mem

__all__ = [
    'hex_encode',
    'hex_decode',
    'pkcs_hash_id',
    'const_time_compare',
    'scrub_mem',
]
