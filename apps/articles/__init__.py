"""
Articles app: editorial workflow, article storage and public reads.
"""
