"""Service Layer — orchestrates core rules around repositories and chain stubs."""
