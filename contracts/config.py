# contracts/config.py
# Environment-driven settings for the match and for LocalNet access
import os

# -------- Match --------
PLAYER_FEE = int(os.getenv("RPS_PLAYER_FEE", "100000"))         # microAlgos per player
PAYOUT_POLICY = os.getenv("RPS_PAYOUT_POLICY", "winner").lower()  # "winner" | "hold"
TEAL_VERSION = int(os.getenv("RPS_TEAL_VERSION", "8"))
LOG_LEVEL = os.getenv("RPS_LOG_LEVEL", "INFO")

# -------- LocalNet --------
ALGOD_ADDR = os.getenv("ALGOD_LOCAL", "http://localhost:4001")
ALGOD_TOKEN = os.getenv("ALGOD_LOCAL_TOKEN", "aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa")
KMD_ADDR = os.getenv("KMD_LOCAL", "http://localhost:4002")
KMD_TOKEN = os.getenv("KMD_LOCAL_TOKEN", ALGOD_TOKEN)  # usually same in sandbox
INDEXER_ADDR = os.getenv("INDEXER_LOCAL", "http://localhost:8980")

if PLAYER_FEE <= 0:
    raise ValueError(f"RPS_PLAYER_FEE must be positive, got {PLAYER_FEE}")
if PAYOUT_POLICY not in ("winner", "hold"):
    raise ValueError(f"RPS_PAYOUT_POLICY must be 'winner' or 'hold', got {PAYOUT_POLICY!r}")
