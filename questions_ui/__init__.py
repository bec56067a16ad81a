"""Questions UI.

Collects answers to a batch of agent questions through a transient local web
form, exposed to agents as an MCP tool.
"""

__version__ = "0.1.0"
