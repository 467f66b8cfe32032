"""
Client layer constants.

Centralized constants for retries, wallet synchronization and artifacts.
"""

# ========================================================================
# RETRY CONSTANTS
# ========================================================================

# Default retry policy for indexer/node reads
RETRY_MAX_ATTEMPTS = 10  # Retries after the first attempt
RETRY_INITIAL_DELAY = 0.5  # Seconds before the first retry
RETRY_BACKOFF_FACTOR = 1.2  # Delay multiplier per retry
RETRY_MAX_DELAY = 30.0  # Upper bound for a single delay (seconds)

# Transaction finality watches start from a longer delay
TX_WATCH_INITIAL_DELAY = 1.0

# ========================================================================
# WALLET SYNCHRONIZATION CONSTANTS
# ========================================================================

# Progress log throttling (seconds between log lines)
SYNC_LOG_INTERVAL = 5.0
FUNDS_LOG_INTERVAL = 10.0

# Deadlines for the bounded waits (seconds)
SYNC_TIMEOUT = 600.0
FUNDS_TIMEOUT = 1800.0

# A restored wallet whose live offset is below persisted offset minus this
# tolerance is considered to be on another chain
CHAIN_RESET_OFFSET_TOLERANCE = 1

# Native token identifier in wallet balance maps
NATIVE_TOKEN = "02000000000000000000000000000000000000000000000000000000000000000000"

# Default snapshot file name inside the sync cache directory
DEFAULT_SNAPSHOT_NAME = "wallet-state.json"

# Seed length for freshly generated wallets (bytes)
WALLET_SEED_BYTES = 32

# Seed holding tokens minted in the genesis block of a local standalone node
GENESIS_MINT_WALLET_SEED = "0000000000000000000000000000000000000000000000000000000000000001"

# ========================================================================
# ARTIFACT & SERVICE CONSTANTS
# ========================================================================

ARTIFACT_FETCH_TIMEOUT = 120.0  # HTTP timeout for key downloads (seconds)
PROOF_SERVER_CHECK_TIMEOUT = 5.0
PROOF_SERVER_ALIVE_MARKER = "We're alive"
