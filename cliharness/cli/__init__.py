"""Command line interface for cliharness."""
