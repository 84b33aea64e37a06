"""MCP server exposing meter and event analysis tools."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .analyzer import analyze
from .config import resolve_scan_config
from .logging_config import setup_logging
from .pipeline import build_report_from_roots
from .report import catalog_to_dict, unresolved_warnings
from .templates import resolve_template as _resolve_template
from .value_types import classify_value as _classify_value


def create_server() -> FastMCP:
    mcp = FastMCP(
        name="Metrics Report",
        instructions=(
            "Catalog meters and events declared in Kotlin sources. Use analyze_source() "
            "for a single file or scan_directory() for a source tree; unresolved names "
            "can be fixed by passing overrides keyed ClassName.variableName."
        ),
        json_response=True,
    )

    @mcp.tool()
    def analyze_source(
        file_name: str,
        text: str,
        overrides: dict[str, str] | None = None,
    ) -> dict:
        """Return the meters and events declared in one source file."""
        result = analyze(file_name, text, overrides or {})
        return {
            "meters": [asdict(meter) for meter in result.meters],
            "events": [asdict(event) for event in result.events],
        }

    @mcp.tool()
    def scan_directory(
        root: str,
        overrides: dict[str, str] | None = None,
        max_files: int | None = None,
    ) -> dict:
        """Return the deduplicated catalog for every source file under a directory."""
        root_path = Path(root)
        if not root_path.is_dir():
            return {"error": f"Not a directory: {root}"}
        catalog = build_report_from_roots(
            [root_path],
            overrides=overrides or {},
            config=resolve_scan_config(),
            max_files=max_files,
        )
        payload = catalog_to_dict(catalog)
        payload["warnings"] = unresolved_warnings(catalog)
        return payload

    @mcp.tool()
    def classify_value(expression: str) -> dict:
        """Return the inferred type label of an event value expression."""
        return {"expression": expression, "value_type": _classify_value(expression)}

    @mcp.tool()
    def resolve_template(expression: str, variables: dict[str, str] | None = None) -> dict:
        """Resolve $name / ${name} tokens of a name expression against the given variables."""
        name, resolved = _resolve_template(expression, variables or {})
        return {"name": name, "resolved": resolved}

    return mcp


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run MCP server for metrics report analysis")
    parser.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "sse", "streamable-http"],
        help="Transport type",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for HTTP transports",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8001,
        help="Port for HTTP transports",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    # stdio transport owns stdout; logging goes to stderr via basicConfig.
    setup_logging(resolve_scan_config().log_level)

    mcp = create_server()
    mcp.settings.host = args.host
    mcp.settings.port = args.port
    mcp.run(transport=args.transport)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
