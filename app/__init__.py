"""pindar application layer: CLI, configuration and orchestration."""
