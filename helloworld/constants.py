"""Hello world client constants."""

GREETING_SEED = "hello"

# Borsh layout of the greeting account: a single little-endian u32 counter.
COUNTER_FORMAT = "<I"
COUNTER_MAX = 2**32 - 1

LAMPORTS_PER_SOL = 1_000_000_000

# Fixed transaction fee estimate added on top of the rent-exempt minimum.
FEE_ALLOWANCE_LAMPORTS = 50_000

DEFAULT_RPC_URL = "http://127.0.0.1:8899"
DEFAULT_COMMITMENT = "confirmed"
DEFAULT_CONFIRM_TIMEOUT = 30.0
CONFIRM_POLL_INTERVAL = 0.5

ALLOWED_COMMITMENT = {"processed", "confirmed", "finalized"}

CLUSTER_URLS = {
    "localnet": DEFAULT_RPC_URL,
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
}

SETTINGS_FILENAME = "helloworld.toml"
