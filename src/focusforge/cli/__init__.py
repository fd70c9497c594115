"""Console entrypoint: bootstrap, slash commands and the interactive loop."""
