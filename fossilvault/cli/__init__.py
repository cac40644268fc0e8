"""Command line tools for FossilVault."""
