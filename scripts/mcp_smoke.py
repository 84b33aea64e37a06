from __future__ import annotations

import argparse
import sys
from pathlib import Path

import anyio
from mcp.client.session import ClientSession
from mcp.client.stdio import StdioServerParameters, stdio_client


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="MCP stdio smoke test")
    parser.add_argument(
        "--file",
        required=True,
        help="Kotlin source file sent to analyze_source",
    )
    return parser.parse_args()


async def run() -> None:
    args = parse_args()
    source = Path(args.file)
    params = StdioServerParameters(
        command=sys.executable,
        args=["-m", "metricscan.mcp_server", "--transport", "stdio"],
    )

    async with stdio_client(params) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            tools = await session.list_tools()
            analysis = await session.call_tool(
                "analyze_source",
                {"file_name": source.name, "text": source.read_text(encoding="utf-8")},
            )

    payload = analysis.structuredContent
    if payload is None and analysis.content:
        payload = [item.model_dump() for item in analysis.content]

    print({
        "tools": [tool.name for tool in tools.tools],
        "analysis": payload,
    })


if __name__ == "__main__":
    anyio.run(run)
