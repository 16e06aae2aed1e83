"""Routing — path expressions, route instances and the namespaced registry.

Routes are registered during start-up and resolved on every committed
path change.
"""
