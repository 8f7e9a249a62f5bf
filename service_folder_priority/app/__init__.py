"""
Folder Priority skill package.

Assigns each record of a search-indexer skill batch a numeric priority
derived from the folders in its storage path. It provides:

- app.main: API surface for the skill endpoint, rule diagnostics and health.
- app.records: Payload normalization and path extraction.
- app.rules: Rule loading and priority resolution strategies.
- app.processing: Per-batch priority assignment.

Guidelines:
- The service is stateless; rules are loaded fresh for every request.
- A batch only fails when the body cannot be read at all; every record of
  an accepted batch receives a priority.
"""
