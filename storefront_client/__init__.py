"""Storefront client: catalog, cart and orders over the storefront API."""

__version__ = "0.1.0"
