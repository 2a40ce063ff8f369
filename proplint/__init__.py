"""Validation of Java .properties localization bundles."""
