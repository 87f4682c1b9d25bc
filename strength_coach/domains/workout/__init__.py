"""Workout domain: catalog, volume balancing, selection, assembly and progression."""
