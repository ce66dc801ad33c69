"""
Message classification domain package.

This package contains:

- the request/result models and the structured output schema
- the provider registry and output strategies (prompt + parsing + LLM calls)
- the classification service and its Temporal activity
- the single and batch classification workflows
- the worker and starter entrypoints

Modules are imported directly (``classifier.service``...) so that the
Temporal workflow sandbox only loads what ``classifier.workflows`` needs.
"""
