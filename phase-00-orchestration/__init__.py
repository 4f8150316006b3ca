"""Phase 00: Orchestration. Config, run window, registry and phase dispatch."""
