"""Click subcommands for pinkeeper."""
