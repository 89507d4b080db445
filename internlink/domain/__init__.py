"""Domain types, validation rules and id/timestamp helpers."""
