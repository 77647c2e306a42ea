"""
Commands - Subcommand implementations for the Blockman CLI.

- serve:     Run the HTTP API
- functions: List functions of a local ABI file
- call:      Run a single read-only call
"""
