"""Bundled data files for confbk."""
