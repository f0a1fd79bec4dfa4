"""
Cryptographic primitives backed by the native library.

This package provides one wrapper per capability family:
- Hashes, MACs, block ciphers and cipher modes
- Key derivation (KDF, PBKDF, scrypt, bcrypt)
- Random number generation and big integers
- Public keys and their operations, X.509 certificates
- Format preserving encryption and AES key wrap
"""

from .rng import RandomNumberGenerator
from .hash import HashFunction
from .mac import MsgAuthCode
from .block_cipher import BlockCipher
from .cipher import Cipher, CipherDirection
from .kdf import kdf, pbkdf, scrypt
from .bcrypt import bcrypt_hash, bcrypt_verify
from .mpi import MPI
from .pubkey import Privkey, Pubkey
from .pk_ops import Signer, Verifier, Encryptor, Decryptor, KeyAgreement
from .x509 import Certificate
from .fpe import FPE
from .keywrap import nist_aes_key_wrap, nist_aes_key_unwrap

__all__ = [
    'RandomNumberGenerator',
    'HashFunction',
    'MsgAuthCode',
    'BlockCipher',
    'Cipher',
    'CipherDirection',
    'kdf',
    'pbkdf',
    'scrypt',
    'bcrypt_hash',
    'bcrypt_verify',
    'MPI',
    'Privkey',
    'Pubkey',
    'Signer',
    'Verifier',
    'Encryptor',
    'Decryptor',
    'KeyAgreement',
    'Certificate',
    'FPE',
    'nist_aes_key_wrap',
    'nist_aes_key_unwrap',
]
