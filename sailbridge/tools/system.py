import os
import platform
import subprocess
import sys
from typing import Any, Dict, List

import psutil

PROBE_TIMEOUT = 5.0

# fixed argv per tool; nothing from the request reaches these
VERSION_COMMANDS: Dict[str, List[str]] = {
    "git": ["git", "--version"],
    "pnpm": ["pnpm", "-v"],
    "npm": ["npm", "-v"],
    "node": ["node", "-v"],
}


def probe_version(argv: List[str], timeout: float = PROBE_TIMEOUT) -> Dict[str, Any]:
    try:
        out = subprocess.run(argv, capture_output=True, text=True, timeout=timeout, check=True)
    except (OSError, subprocess.SubprocessError) as e:
        return {"ok": False, "error": str(e)}
    return {"ok": True, "version": out.stdout.strip()}


def env_info(**kwargs) -> Dict[str, Any]:
    probes = {name: probe_version(argv) for name, argv in VERSION_COMMANDS.items()}
    tools = [name for name, res in probes.items() if res["ok"]]

    def version(name):
        res = probes[name]
        return res["version"] if res["ok"] else None

    mem = psutil.virtual_memory()
    return {
        "os": f"{sys.platform} {platform.machine()}",
        "platform": platform.platform(),
        "shell": os.getenv("SHELL") or os.getenv("ComSpec"),
        "pythonVersion": platform.python_version(),
        "nodeVersion": version("node"),
        "npmVersion": version("npm"),
        "gitVersion": version("git"),
        "pnpmVersion": version("pnpm"),
        "tools": tools,
        "cpuCount": psutil.cpu_count(),
        "memory": dict(total=mem.total, percent=mem.percent),
        "isLocalConnected": True,
    }
