"""Core backup logic for confbk.

This package contains path resolution, exclusion filtering, copying,
archiving, and configuration handling.
"""
