"""
Routers module - API endpoint handlers organized by feature.

- explain: canvas generation and the quick preview answer
- export: PNG/PDF export and one-time download links
- history: local history of past results
- stats: AI usage statistics
- shell: the single-page presentation shell
"""
