"""
Bitcoin Cash and CashTokens constants used when building genesis transactions.

Size model for fee estimation (upper bounds, P2PKH only):

    P2PKH input  = 32 (outpoint txid) + 4 (vout) + 1 (script length)
                 + 1 + 72 (push + DER signature with sighash byte)
                 + 1 + 33 (push + compressed pubkey) + 4 (sequence) = 148
    P2PKH output = 8 (value) + 1 (script length) + 25 (script) = 34
    Overhead     = 4 (version) + 1 (input count) + 1 (output count) + 4 (locktime) = 10
    Token prefix ~ 50 (prefix byte, category, bitfield, commitment/amount)
"""

from __future__ import annotations

TX_OVERHEAD = 10
P2PKH_INPUT_SIZE = 148
P2PKH_OUTPUT_SIZE = 34
TOKEN_PREFIX_OVERHEAD = 50

DEFAULT_FEE_RATE = 1.0  # sat/byte

# Standard P2PKH dust limit; change at or below this is dropped into the fee
DUST_THRESHOLD = 546  # satoshis

# Value carried by the token output so it is not treated as dust
TOKEN_OUTPUT_DUST = 1000  # satoshis

TX_VERSION = 2
TX_LOCKTIME = 0
DEFAULT_SEQUENCE = 0xFFFFFFFF

# SIGHASH_ALL | SIGHASH_FORKID
SIGHASH_ALL_FORKID = 0x41

OP_RETURN = 0x6A

# Bitcoin Cash Metadata Registry marker pushed in front of the URI
BCMR_MARKER = b"BCMR"
MAX_BCMR_URI_BYTES = 220

# CashTokens limits
MAX_COMMITMENT_LENGTH = 40
MAX_TOKEN_AMOUNT = 0x7FFFFFFFFFFFFFFF
MAX_METADATA_LENGTH = 1000
MAX_DECIMALS = 18

# Synthetic outpoint used by offline builds
ZERO_TXID = "00" * 32
