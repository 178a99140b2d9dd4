"""Click subcommands for the legacyfit CLI."""
