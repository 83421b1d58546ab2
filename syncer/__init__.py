"""
Module: __init__.py
Description:
    Seerr blocklist sync: REST client, blocklist fetcher, anime-list loader
    and the reconciliation loop tying them together.

Usage:
    Imported by other modules; not intended to be executed directly.

Notes:
    Reads configuration from `.env`.
    - Required/used env vars:
        * None
"""
