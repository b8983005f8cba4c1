"""MySQL catalog tools."""
