"""Domain models (Value Objects and result records)."""
