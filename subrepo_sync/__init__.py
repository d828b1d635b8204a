"""
subrepo-sync keeps nested git working copies in step with their remotes.

The ``save`` action stages, commits and pushes local changes; ``update``
discards local changes and fast-forwards from ``origin``.
"""
