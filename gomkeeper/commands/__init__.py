"""Click subcommands registered by :mod:`gomkeeper.cli`."""
