"""
Browser inspection tools for MCP clients.

Selectors are normalized and resolved to one element (preferring visible
matches), described compactly, and diagnosed for layout problems by walking
the ancestor chain. Everything that touches the browser goes through a
Selenium WebDriver held by an explicit BrowserSession.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
