"""Framework-free domain types.

`links` holds the hypermedia value types (links, URI templates, template
variables) shared by the API and the smoke runner.
"""
__all__ = ["links"]
