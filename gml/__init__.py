"""gml - Gmail command-line client.

Package layout:
- gml.sdk: Core library for listing and reading Gmail messages
- gml.cli: Command-line interface
"""

__version__ = "0.3.0"
