"""
Test support utilities for sqlbind tests.

Dataclass models live at module level here so their annotations resolve
through ``typing.get_type_hints``; the recording connection lets tests
assert on generated SQL without a database.
"""
