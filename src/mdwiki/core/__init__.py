"""Content resolution and rendering pipeline."""
