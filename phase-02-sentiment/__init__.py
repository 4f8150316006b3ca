"""Phase 02: Lexicon sentiment scoring."""
