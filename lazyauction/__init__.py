"""
LazyAuction

A single-asset auction engine with lazy minting:
- Issuer-signed vouchers (EIP-712 typed data, secp256k1)
- Per-bidder escrow with post-close withdrawal
- Mint-and-transfer settlement to the highest bidder
"""

__version__ = "0.1.0"
