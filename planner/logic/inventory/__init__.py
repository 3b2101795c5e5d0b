"""Ledger and catalog commands plus read-side inventory views."""
