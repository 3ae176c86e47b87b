"""Storefront catalog bulk product import service."""
