# contracts/build.py
# python -m contracts.build  -> artifacts/{approval,clear}.teal + contract.manifest.json
import json, hashlib, logging
from pathlib import Path
from pyteal import compileTeal, Mode

from contracts.config import PAYOUT_POLICY, PLAYER_FEE, TEAL_VERSION
from contracts.coordinator import PayoutPolicy
from contracts.logging_config import setup_logging
from contracts.rps_app import GLOBAL_BYTES, GLOBAL_UINTS, approval_program, clear_state_program

logger = logging.getLogger(__name__)

ARTIFACTS = Path(__file__).resolve().parent.parent / "artifacts"

def sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()

def compile_programs(fee: int = PLAYER_FEE, payout_policy: PayoutPolicy = PayoutPolicy(PAYOUT_POLICY)) -> tuple[str, str]:
    approval_teal = compileTeal(approval_program(fee, payout_policy), mode=Mode.Application, version=TEAL_VERSION)
    clear_teal = compileTeal(clear_state_program(), mode=Mode.Application, version=TEAL_VERSION)
    return approval_teal, clear_teal

def build_manifest(approval_teal: str, clear_teal: str, fee: int, payout_policy: PayoutPolicy) -> dict:
    return {
        "contract": "Rock-Paper-Scissors commit-reveal",
        "teal_version": TEAL_VERSION,
        "player_fee": fee,
        "payout_policy": payout_policy.value,
        "global_schema": {"num_uints": GLOBAL_UINTS, "num_byte_slices": GLOBAL_BYTES},
        "local_schema": {"num_uints": 0, "num_byte_slices": 0},
        "artifacts": {
            "approval": {"file": "approval.teal", "sha256": sha256_hex(approval_teal)},
            "clear": {"file": "clear.teal", "sha256": sha256_hex(clear_teal)},
        },
    }

def build(out_dir: Path = ARTIFACTS, fee: int = PLAYER_FEE,
          payout_policy: PayoutPolicy = PayoutPolicy(PAYOUT_POLICY)) -> dict:
    out_dir.mkdir(parents=True, exist_ok=True)
    approval_teal, clear_teal = compile_programs(fee, payout_policy)

    (out_dir / "approval.teal").write_text(approval_teal, encoding="utf-8")
    (out_dir / "clear.teal").write_text(clear_teal, encoding="utf-8")

    manifest = build_manifest(approval_teal, clear_teal, fee, payout_policy)
    (out_dir / "contract.manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    logger.info("Wrote artifacts to %s (fee=%d, payout=%s)", out_dir, fee, payout_policy.value)
    return manifest

def main():
    setup_logging()
    build()

if __name__ == "__main__":
    main()
