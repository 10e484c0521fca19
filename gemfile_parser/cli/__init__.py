"""Command line interface for gemfile-parser."""
