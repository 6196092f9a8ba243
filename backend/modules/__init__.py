"""
Feature modules for the SparkTasks backend.

Each module is self-contained with its own:
- models.py: Pydantic models for documents and requests
- repository.py: Supabase access for the module's tables
- viewmodel.py: Stateful controller the API drives
- exceptions.py: Module-specific exceptions

The auth module instead provides interfaces.py and service.py: the
identity provider protocol and its Supabase implementation.
"""
