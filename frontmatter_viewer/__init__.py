"""
Frontmatter viewer core package.

This package currently focuses on the sync subsystem. It exposes a parser
for the constrained metadata dialect found at the top of wiki pages, an
extractor for the delimited header block, an HTTP fetcher for page bodies,
a navigation monitor for history-driven address changes, and a controller
that keeps the displayed metadata in step with the active page.
"""
