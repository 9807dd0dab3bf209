"""Domain apps of the homestay booking service."""
