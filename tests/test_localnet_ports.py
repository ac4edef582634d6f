import requests

def test_algod_health(algod_url):
    r = requests.get(f"{algod_url}/health", timeout=10)
    assert r.status_code == 200

def test_indexer_health(indexer_url):
    r = requests.get(f"{indexer_url}/health", timeout=10)
    assert r.status_code == 200
