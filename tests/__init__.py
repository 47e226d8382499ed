"""Tests for the groupfit application."""
