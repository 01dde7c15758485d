"""String classification and temporal stabilization."""
