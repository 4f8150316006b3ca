"""Phase 01: Entry Ingestion."""
