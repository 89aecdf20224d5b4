"""Core building blocks shared by emcp-tools commands."""
