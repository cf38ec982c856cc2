"""
Newline-delimited JSON sink for per-cycle training statistics.
"""
import json
from pathlib import Path
from typing import Any, Dict, List


class JsonlStatsSink:
    """
    Appends one JSON object per line to `path`.

    Write errors are not caught: losing the statistics of a run is fatal.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: Dict[str, Any]):
        with open(self.path, 'a') as f:
            f.write(json.dumps(record) + "\n")


def load_stats(path: Path | str) -> List[Dict[str, Any]]:
    """Read back every record written by JsonlStatsSink, skipping blank lines."""
    records = []
    with open(path, 'r') as f:
        for line in f:
            line = line.strip()
            if line:
                records.append(json.loads(line))
    return records
