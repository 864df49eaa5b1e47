"""
Knowledge package.

Shared memory for one engine instance: append-only memory elements per
subject, derived relationships, and the related scratch list used to carry
relationship targets from a condition to its action.
"""
