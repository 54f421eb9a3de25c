"""dynstore: commands subpackage
---------------------------------------------------------
CLI commands exposed by the ``dynstore`` tool, organized into Typer groups.

Public API
----------
``routes`` : Route inspection (``dynstore routes list/match/resolve``)
``config`` : Configuration display (``dynstore config show``)
"""
