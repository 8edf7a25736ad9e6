"""Pytest plugins shipped with Cart Recon."""
