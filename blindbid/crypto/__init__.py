"""
Cryptographic primitives for BlindBid.

This module provides:
- Keccak-256 hashing (Ethereum-style)
- Bid blinding: the commitment scheme used by the auction
- Key generation and address derivation (secp256k1)

Design Notes:
-------------
A blinded bid is keccak256 over the tightly packed pair (uint256 amount, bool fake):
32 bytes of big-endian amount followed by a single 0x00/0x01 byte. This matches
Solidity's keccak256(abi.encodePacked(amount, fake)).

No secret salt is mixed into the commitment. Anyone who sees a commitment can
search a small (amount, fake) space and recover the bid before it is revealed.
Callers who need hiding should not rely on this scheme alone.
"""

import secrets
from dataclasses import dataclass

from Crypto.Hash import keccak
from py_ecc.secp256k1 import secp256k1


# =============================================================================
# Constants
# =============================================================================

# secp256k1 curve order (number of points on the curve)
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

UINT256_MAX = 2**256 - 1

COMMITMENT_SIZE = 32
ADDRESS_SIZE = 20

# Sentinel written over a commitment once it has been revealed
EMPTY_COMMITMENT = bytes(COMMITMENT_SIZE)


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).
    
    Used for: bid commitments, address derivation.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Bid Blinding
# =============================================================================


def encode_packed_bid(amount: int, is_fake: bool) -> bytes:
    """
    Encode (amount, fake) the way abi.encodePacked(uint256, bool) does.
    
    Args:
        amount: Bid amount in base units (0 <= amount <= 2**256 - 1)
        is_fake: Whether the bid is a decoy
        
    Returns:
        33 bytes: 32-byte big-endian amount + 1 flag byte
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Amount must be int, got {type(amount).__name__}")
    if amount < 0 or amount > UINT256_MAX:
        raise ValueError(f"Amount {amount} out of uint256 range")
    if not isinstance(is_fake, bool):
        raise ValueError(f"Fake flag must be bool, got {type(is_fake).__name__}")
    
    return amount.to_bytes(32, byteorder="big") + (b"\x01" if is_fake else b"\x00")


def blind(amount: int, is_fake: bool) -> bytes:
    """
    Blind a bid.
    
    Deterministic: the same (amount, is_fake) pair always yields the same
    32-byte commitment, distinct pairs yield distinct commitments.
    
    Args:
        amount: Bid amount in base units
        is_fake: Whether the bid is a decoy that will never compete
        
    Returns:
        32-byte commitment
    """
    return keccak256(encode_packed_bid(amount, is_fake))


# =============================================================================
# Key Generation
# =============================================================================


@dataclass
class KeyPair:
    """
    An ECDSA keypair on secp256k1.
    
    Attributes:
        private_key: 32-byte secret key (integer in [1, order-1])
        public_key: 64-byte uncompressed public key (x || y coordinates)
    """
    private_key: bytes  # 32 bytes
    public_key: bytes   # 64 bytes (uncompressed, no 0x04 prefix)
    
    @property
    def address(self) -> bytes:
        """20-byte address derived from the public key."""
        return address_from_public_key(self.public_key)
    
    @property
    def address_hex(self) -> str:
        """Address as 0x-prefixed hex."""
        return bytes_to_hex(self.address)


def generate_keypair() -> KeyPair:
    """
    Generate a new random keypair.
    
    Uses cryptographically secure random number generator.
    """
    private_key_int = secrets.randbelow(SECP256K1_ORDER - 1) + 1
    private_key = private_key_int.to_bytes(32, byteorder="big")
    
    # P = k * G
    public_key_point = secp256k1.privtopub(private_key)
    x_bytes = public_key_point[0].to_bytes(32, byteorder="big")
    y_bytes = public_key_point[1].to_bytes(32, byteorder="big")
    
    return KeyPair(private_key=private_key, public_key=x_bytes + y_bytes)


def address_from_public_key(public_key: bytes) -> bytes:
    """
    Derive address from public key.
    
    Address = last 20 bytes of keccak256(public_key).
    """
    if len(public_key) != 64:
        raise ValueError(f"Public key must be 64 bytes, got {len(public_key)}")
    return keccak256(public_key)[-ADDRESS_SIZE:]


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)


def is_valid_address(address: str) -> bool:
    """Check if string is a valid address format."""
    if not address.startswith("0x"):
        return False
    if len(address) != 42:  # 0x + 40 hex chars
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


__all__ = [
    "keccak256",
    "encode_packed_bid",
    "blind",
    "KeyPair",
    "generate_keypair",
    "address_from_public_key",
    "bytes_to_hex",
    "hex_to_bytes",
    "is_valid_address",
    "EMPTY_COMMITMENT",
    "COMMITMENT_SIZE",
    "ADDRESS_SIZE",
    "UINT256_MAX",
    "SECP256K1_ORDER",
]
