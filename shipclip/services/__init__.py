"""Import services: file metadata, orchestration, progress and summary."""
