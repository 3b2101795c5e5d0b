"""Receipt reconciliation, whole-state import/export and legacy shape upgrades."""
