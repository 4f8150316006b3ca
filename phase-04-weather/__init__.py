"""Phase 04: Mind Weather score calculation."""
