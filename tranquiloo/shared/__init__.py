"""Shared models and utilities for the triage pipeline."""
