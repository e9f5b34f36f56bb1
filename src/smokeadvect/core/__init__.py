"""Data structures, grid helpers and scratch storage."""
