"""
Module: __init__.py
Description:
    Helper commands exposed under `cli.py tools`.

Usage:
    Imported by other modules; not intended to be executed directly.
"""
