# =============================================================================
# PLACEMENT-EXCLUDER core
# =============================================================================
