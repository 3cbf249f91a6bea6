"""Command line tool for cluster-assets."""
