"""Application workflows composing the receipt core with runtime services."""
