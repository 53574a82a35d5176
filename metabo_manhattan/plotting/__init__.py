"""Scene construction, rendering and batch export."""
