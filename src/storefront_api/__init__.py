"""Storefront API: Shopify customer account login and session handling."""

__version__ = "0.1.0"
