"""Utility modules for Plume."""
