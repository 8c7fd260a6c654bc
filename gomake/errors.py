"""
errors.py

Common base for every error gomake reports at the top level.

Each module defines its own subclass next to the code that raises it;
`cli.main` only needs to know about `GoMakeError`.
"""

from __future__ import annotations


class GoMakeError(RuntimeError):
    pass
