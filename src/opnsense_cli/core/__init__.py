"""Normalization engine: turns raw OPNsense responses into canonical entities."""
