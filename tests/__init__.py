"""Tests for lightctl."""
