"""Phase 03: Pattern detection over reflection texts."""
