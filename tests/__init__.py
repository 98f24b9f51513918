"""Tests for the HTTP lock custom integration."""
