"""Bundled data files (theme, default manifests)."""
