"""Statement modules built on the statement kernel."""
