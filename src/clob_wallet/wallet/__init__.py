"""Wallet identity for the CLOB.

Stores a single wallet locally, signs the EIP-712 ownership proof used to
derive or create API credentials, signs each authenticated request with
the issued HMAC secret, and reads the wallet's USDC balance.
"""
