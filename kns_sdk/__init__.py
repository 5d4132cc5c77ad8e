"""
Kabuto Name Service (KNS) SDK for Python.
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import KnsConfig  # noqa: F401
from .errors import (  # noqa: F401
    InvalidNameFormat,
    InvalidRecordNameFormat,
    KnsError,
    LedgerStatusError,
    NameNotFound,
    SignerRejected,
    SignerRequired,
    UnsupportedCoinType,
    ValueTooLarge,
)

# Client
from .client import KNS  # noqa: F401

# Ledger identifiers & collaborator contract
from .account_id import AccountId, ContractId, PublicKey, TokenId  # noqa: F401
from .ledger import (  # noqa: F401
    ContractExecuteTransaction,
    ContractFunctionParameters,
    LedgerClient,
    Signer,
    TokenAssociateTransaction,
    TransactionReceipt,
    TransactionResponse,
)

# Address codec
from .address import (  # noqa: F401
    CoinType,
    deserialize_hedera_address,
    format_address,
    serialize_address,
    serialize_hedera_address,
)

# Names & pricing
from .names import (  # noqa: F401
    ParsedName,
    ParsedRecordName,
    normalize_name,
    normalize_record_name,
    parse_name,
    parse_record_name,
)
from .pricing import get_register_price_hbar, get_register_price_usd  # noqa: F401

# Models
from .models import AddressRecord, Name, NameRecords, OwnedName, TextRecord  # noqa: F401

# Utilities
from .utils.bytes import to_bytes32  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "KnsConfig",
    "KnsError", "InvalidNameFormat", "InvalidRecordNameFormat", "UnsupportedCoinType",
    "NameNotFound", "SignerRequired", "SignerRejected", "LedgerStatusError", "ValueTooLarge",
    # Client
    "KNS",
    # Ledger
    "AccountId", "ContractId", "TokenId", "PublicKey",
    "ContractExecuteTransaction", "ContractFunctionParameters", "TokenAssociateTransaction",
    "TransactionReceipt", "TransactionResponse", "Signer", "LedgerClient",
    # Address
    "CoinType", "serialize_address", "serialize_hedera_address",
    "deserialize_hedera_address", "format_address",
    # Names / pricing
    "ParsedName", "ParsedRecordName", "parse_name", "parse_record_name",
    "normalize_name", "normalize_record_name",
    "get_register_price_usd", "get_register_price_hbar",
    # Models
    "AddressRecord", "TextRecord", "Name", "NameRecords", "OwnedName",
    # Utils
    "to_bytes32",
]
