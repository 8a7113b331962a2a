"""Command line interface for abilityforge."""
