"""Per-tool adapters turning decoded records into issues."""
