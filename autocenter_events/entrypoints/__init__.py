"""Host entry points feeding document writes into the engine."""
