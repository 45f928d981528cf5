"""Cross-Origin Resource Sharing configuration, validation and middleware."""

__all__ = ["all_or_some", "errors", "inner", "values", "middleware", "builder"]