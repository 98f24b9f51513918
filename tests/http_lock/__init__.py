"""Tests for the http_lock integration."""
