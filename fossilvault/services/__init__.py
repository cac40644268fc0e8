"""Services for FossilVault."""
