"""gml command-line interface."""
