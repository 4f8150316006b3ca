"""Phase 05: Per-user score history."""
