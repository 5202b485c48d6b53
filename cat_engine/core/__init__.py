"""Settings, logging and errors shared by the engine."""
