"""Report formatting for performance summaries.

Outputs summaries as console text and JSON files.
"""

from __future__ import annotations

from pathlib import Path

import orjson

from core.stats import PerformanceSummary


class ReportFormatter:
    """Format performance summaries for display and export."""

    @staticmethod
    def format_console(
        summary: PerformanceSummary,
        uptime: float | None = None,
        messages_processed: int | None = None,
    ) -> str:
        """Render a summary as a text block."""
        lines = ["", "=== Performance Summary ==="]
        if uptime is not None:
            lines.append(f"  Uptime:                  {int(uptime)}s")
        if messages_processed is not None:
            lines.append(f"  Messages processed:      {messages_processed}")
        lines.extend([
            f"  Total trades:            {summary.total_trades}",
            f"  Closed trades:           {summary.closed_trades}",
            f"  Open position:           {summary.open_position}",
            f"  Total PnL:               {summary.total_pnl:.6f}",
            f"  Win rate:                {summary.win_rate * 100:.2f}%",
            f"  Average execution price: {summary.average_execution_price:.6f}",
            "===========================",
        ])
        return "\n".join(lines)

    @staticmethod
    def to_dict(summary: PerformanceSummary) -> dict:
        """Convert a summary to a JSON-serializable dict."""
        return {
            "overall": {
                "total_trades": summary.total_trades,
                "closed_trades": summary.closed_trades,
                "open_position": summary.open_position,
                "total_pnl": summary.total_pnl,
                "win_rate": round(summary.win_rate, 4),
                "average_execution_price": summary.average_execution_price,
                "wins": summary.wins,
                "losses": summary.losses,
            },
            "trades": [
                {
                    **t.model_dump(mode="json"),
                    "status": t.status.value,
                    "pnl": t.pnl,
                }
                for t in summary.trades
            ],
        }

    @staticmethod
    def save_json(summary: PerformanceSummary, path: str | Path) -> None:
        """Write a summary to a JSON file."""
        data = ReportFormatter.to_dict(summary)
        Path(path).write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
        print(f"\nResults saved to {path}")
