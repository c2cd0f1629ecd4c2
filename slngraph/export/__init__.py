"""Serializers for built graphs."""

from slngraph.export.json import export_json, graph_to_dict

__all__ = ["export_json", "graph_to_dict"]
