"""Command line subcommands for weakassoc."""
