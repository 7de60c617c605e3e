"""splatcad desktop client state and entry point."""
