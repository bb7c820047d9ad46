"""sp1-build command line."""
