"""
Toolbox CLI commands.

- validate: decode tools files through the tool registry
- manifest: print generic or MCP manifests
"""
