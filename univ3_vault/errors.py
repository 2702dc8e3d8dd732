"""
Vault error taxonomy.

Every failure is synchronous and non-retryable. The vault aborts the whole
operation and restores the pre-call state before the exception propagates.
Each class carries a short ``code`` mirroring the on-chain revert reason.
"""

from typing import Optional


class VaultError(Exception):
    """Base exception for vault operations."""

    code: str = "VAULT"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.__class__.__doc__)


class ZeroShares(VaultError):
    """Withdraw requested with zero shares."""
    code = "S"


class ZeroAddress(VaultError):
    """Beneficiary is the null identity."""
    code = "WZA"


class Unauthorized(VaultError):
    """Caller is neither the owner nor the admin."""
    code = "OAM"


class ZeroLiquidity(VaultError):
    """Amounts are too small to produce nonzero liquidity."""
    code = "ZL"


class InvalidRange(VaultError, ValueError):
    """Tick bounds are malformed."""
    code = "IR"


class InsufficientBalance(VaultError):
    """Ledger balance is too small for the requested transfer or burn."""
    code = "IB"


class InsufficientLiquidity(VaultError):
    """Position holds less liquidity than requested."""
    code = "IL"


class AdapterMismatch(VaultError):
    """Position adapter consumed more tokens than the vault supplied."""
    code = "AM"


class MathError(VaultError, ArithmeticError):
    """Base exception for fixed-point math failures."""
    code = "MATH"


class OutOfRange(MathError, ValueError):
    """Tick or sqrt price outside the valid domain."""
    code = "R"


class ArithmeticOverflow(MathError):
    """Fixed-point result does not fit its unsigned width."""
    code = "OF"


class DivideByZero(MathError):
    """Division by a zero denominator."""
    code = "DZ"
