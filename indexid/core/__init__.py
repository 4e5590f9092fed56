"""Registry core: handles, errors and the id registry."""
