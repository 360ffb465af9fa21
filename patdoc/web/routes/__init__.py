"""Routers of the catalog web app."""
