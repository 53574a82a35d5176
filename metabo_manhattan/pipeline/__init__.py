"""Table ingestion, layout, reshaping and ranking."""
