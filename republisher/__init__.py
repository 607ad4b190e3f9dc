"""
Service Center module republisher.

Scans the module list for modules flagged with warnings, stores them in a
sorted snapshot, and republishes each one on every deployment target.
"""
