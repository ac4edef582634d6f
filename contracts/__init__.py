# contracts/__init__.py
# Rock-Paper-Scissors commit-reveal match: PyTeal app + off-chain reference model
