# =============================================================================
# PLACEMENT EXCLUDER
# Display / Demand Gen placement exclusion job
# =============================================================================
"""
Keyword-driven placement exclusion for Display and Demand Gen campaigns.

Pipeline (one pass per scheduled run):
- report: pull placement rows for a trailing date window
- classifier: decide per url (ignore terms win over exclude terms)
- applier: exclude on the ad group + append to the shared exclusion list
- run_exclusions: orchestrate, count, print the summary

Usage:
    python -m core.exclude.run_exclusions             # DRY_RUN (default)
    python -m core.exclude.run_exclusions --execute   # LIVE WRITES
"""
