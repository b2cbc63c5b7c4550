"""
AI draft assistant: summaries, tags, SEO metadata and translation for
article drafts. Suggestions only; never writes articles.
"""
