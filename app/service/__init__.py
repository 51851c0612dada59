"""Use-cases behind the HTTP layer."""
