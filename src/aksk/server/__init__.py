"""Bundled server protected by signature verification."""
