"""Ingestion of recorded telemetry datasets."""
