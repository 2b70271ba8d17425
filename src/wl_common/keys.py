"""Key layout of the flat key-value namespace.

  wallet_<walletId>                 Wallet
  transaction_<walletId>_<suffix>   Transaction (transaction id = <walletId>_<suffix>)
  user_<userId>                     User
  auth_<normalizedUsername>         Credential
"""

WALLET_PREFIX = "wallet_"
TRANSACTION_PREFIX = "transaction_"
USER_PREFIX = "user_"
AUTH_PREFIX = "auth_"


def wallet_key(wallet_id: str) -> str:
    return f"{WALLET_PREFIX}{wallet_id}"


def transaction_key(transaction_id: str) -> str:
    return f"{TRANSACTION_PREFIX}{transaction_id}"


def wallet_transactions_prefix(wallet_id: str) -> str:
    # Trailing "_" keeps wallet "12" from matching transactions of wallet "123"
    return f"{TRANSACTION_PREFIX}{wallet_id}_"


def user_key(user_id: str) -> str:
    return f"{USER_PREFIX}{user_id}"


def auth_key(normalized_username: str) -> str:
    return f"{AUTH_PREFIX}{normalized_username}"


def normalize_username(name: str) -> str:
    """Usernames are case-insensitive: lower-case and trim before any lookup."""
    return name.lower().strip()
