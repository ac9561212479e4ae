"""Issuance Lambda for private keys and client certificates."""
