"""Slot availability, add-on eligibility, and pricing for a pet-grooming shop."""
