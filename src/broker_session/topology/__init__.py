"""Exchange, queue and binding declarations."""

from .topology_declarator import TopologyDeclarator

__all__ = ["TopologyDeclarator"]
