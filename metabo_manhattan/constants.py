"""Constants for the Manhattan plotting pipeline."""

# Input table headers (fixed, in this order)
INPUT_INDEX_COL = "Index"
INPUT_CHROMOSOME_COL = "Linkage_Group"
INPUT_DISTANCE_COL = "Genetic_Distance"
INPUT_METADATA_COLUMNS = [INPUT_INDEX_COL, INPUT_CHROMOSOME_COL, INPUT_DISTANCE_COL]

# Canonical column names used after ingestion
INDEX_COL = "index"
CHROMOSOME_COL = "chromosome"
DISTANCE_COL = "genetic_distance"
METADATA_COLUMNS = [INDEX_COL, CHROMOSOME_COL, DISTANCE_COL]

INPUT_COLUMN_MAP = {
    INPUT_INDEX_COL: INDEX_COL,
    INPUT_CHROMOSOME_COL: CHROMOSOME_COL,
    INPUT_DISTANCE_COL: DISTANCE_COL,
}

# Long-form columns
TRAIT_COL = "trait"
SCORE_COL = "score"
LONG_COLUMNS = METADATA_COLUMNS + [TRAIT_COL, SCORE_COL]

# Cell values read as "no association recorded"
ABSENT_TOKENS = ["", "NA", "N/A", "NaN", "nan", "null"]

# Plot defaults
DEFAULT_THRESHOLD = 5.0  # -log10(p)
DEFAULT_TOP_N = 10
DEFAULT_FACET_ROWS = 2
DEFAULT_PALETTE = ("#1B4F72", "#85929E")
DEFAULT_HIGHLIGHT_COLOR = "#E74C3C"
THRESHOLD_LINE_COLOR = "#C0392B"

RENDER_MODES = ("separate", "faceted")
EXPORT_FORMATS = ("html", "png", "pdf", "svg")
DEFAULT_EXPORT_FORMAT = "png"

# Figure geometry
FIGURE_WIDTH = 1400
FIGURE_HEIGHT = 500
FACET_PANEL_HEIGHT = 320
Y_AXIS_TITLE = "-log10(p)"
X_AXIS_TITLE = "Linkage group"
