from __future__ import annotations

import anyio

from metricscan.mcp_server import create_server


def test_server_registers_analysis_tools():
    server = create_server()

    tools = anyio.run(server.list_tools)
    names = {tool.name for tool in tools}

    assert {"analyze_source", "scan_directory", "classify_value", "resolve_template"} <= names
