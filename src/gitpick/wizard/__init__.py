"""Wizard engine, step descriptors and the step library."""
