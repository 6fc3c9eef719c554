"""CLI subcommand handlers."""
