"""Routing: per-app trie route tables.

Every ``App`` owns its own ``Router``; isolated host engines never share
a route table. ``RouteGroup`` mounts routes under a path prefix.
"""
