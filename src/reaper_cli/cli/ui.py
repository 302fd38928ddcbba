"""Reusable UI helpers for reaper-cli output."""

from __future__ import annotations

from rich.tree import Tree

_SYMBOLS = {
    "pending": "[green dim]○[/green dim]",
    "done": "[green]●[/green]",
    "error": "[red]●[/red]",
    "skipped": "[yellow]○[/yellow]",
}


class StepTracker:
    """Track per-item results and render them as a Rich tree."""

    def __init__(self, title: str):
        self.title = title
        self.steps = []  # list of dicts: {key, label, status, detail}

    def add(self, key: str, label: str):
        if key not in [s["key"] for s in self.steps]:
            self.steps.append({"key": key, "label": label, "status": "pending", "detail": ""})

    def complete(self, key: str, detail: str = ""):
        self._update(key, status="done", detail=detail)

    def error(self, key: str, detail: str = ""):
        self._update(key, status="error", detail=detail)

    def skip(self, key: str, detail: str = ""):
        self._update(key, status="skipped", detail=detail)

    def count(self, status: str) -> int:
        return sum(1 for s in self.steps if s["status"] == status)

    def _update(self, key: str, status: str, detail: str):
        for s in self.steps:
            if s["key"] == key:
                s["status"] = status
                if detail:
                    s["detail"] = detail
                return
        self.steps.append({"key": key, "label": key, "status": status, "detail": detail})

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for step in self.steps:
            symbol = _SYMBOLS.get(step["status"], " ")
            detail = step["detail"].strip()
            if detail:
                line = f"{symbol} [white]{step['label']}[/white] [bright_black]({detail})[/bright_black]"
            else:
                line = f"{symbol} [white]{step['label']}[/white]"
            tree.add(line)
        return tree
