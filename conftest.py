# conftest.py
# LocalNet fixtures shared by contracts/ and tests/; LocalNet tests skip when algod is down
import pytest
import requests
from algosdk import account, transaction
from algosdk.kmd import KMDClient
from algosdk.v2client.algod import AlgodClient

from contracts.config import ALGOD_ADDR, ALGOD_TOKEN, INDEXER_ADDR, KMD_ADDR, KMD_TOKEN

PLAYER_FUNDING = 2_000_000  # microAlgos per generated player


def _healthy(url: str) -> bool:
    try:
        return requests.get(f"{url}/health", timeout=3).status_code == 200
    except requests.RequestException:
        return False


@pytest.fixture(scope="session")
def algod_url() -> str:
    if not _healthy(ALGOD_ADDR):
        pytest.skip(f"LocalNet algod not reachable at {ALGOD_ADDR}")
    return ALGOD_ADDR


@pytest.fixture(scope="session")
def indexer_url() -> str:
    if not _healthy(INDEXER_ADDR):
        pytest.skip(f"LocalNet indexer not reachable at {INDEXER_ADDR}")
    return INDEXER_ADDR


@pytest.fixture(scope="session")
def algod(algod_url) -> AlgodClient:
    return AlgodClient(ALGOD_TOKEN, algod_url, headers={"X-Algo-API-Token": ALGOD_TOKEN})


def _wallet_and_key(kmd: KMDClient) -> tuple[str, str]:
    # algosdk versions differ: some return {"wallets": [...]}, others return a plain list
    wallets = kmd.list_wallets()
    wl = wallets["wallets"] if isinstance(wallets, dict) else wallets
    assert wl, "No KMD wallets found in LocalNet"
    wid = wl[0]["id"]
    for pw in ["", "a", "testpassword"]:
        try:
            h = kmd.init_wallet_handle(wid, pw)
        except Exception:
            continue
        try:
            keys = kmd.list_keys(h)
            addr = keys[0] if keys else kmd.generate_key(h)
            return addr, kmd.export_key(h, pw, addr)
        finally:
            kmd.release_wallet_handle(h)
    raise AssertionError("Could not unlock KMD wallet with '', 'a', or 'testpassword'")


@pytest.fixture(scope="session")
def funder(algod) -> tuple[str, str]:
    """(address, private key) of the LocalNet dispenser account held by KMD."""
    return _wallet_and_key(KMDClient(KMD_TOKEN, KMD_ADDR))


@pytest.fixture
def make_player(algod, funder):
    """Factory: fresh account funded from the dispenser; returns (address, private key)."""
    sender, sk = funder

    def _make() -> tuple[str, str]:
        player_sk, player_addr = account.generate_account()
        txn = transaction.PaymentTxn(sender, algod.suggested_params(), player_addr, PLAYER_FUNDING)
        txid = algod.send_transaction(txn.sign(sk))
        transaction.wait_for_confirmation(algod, txid, 10)
        return player_addr, player_sk

    return _make
