"""Command-line front end, configuration and version metadata for the updater."""
