"""Heuristic source analysis for permission detection.

Scans source text for patterns that suggest a resource access.  Results
are *suggestions* for a human reviewing a draft manifest; nothing here is
on the enforcement path.

Patterns cover common JavaScript/TypeScript and Python idioms.

Example
-------
>>> [d.permission.value for d in detect_permissions("requests.get(url)")]
['mcp.ac.network.client']
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from agentbound.permissions.vocabulary import Permission


@dataclass(frozen=True)
class DetectionPattern:
    """Regexes whose matches suggest a single permission."""

    permission: Permission
    patterns: tuple[re.Pattern[str], ...]
    rationale: str


def _compile(*sources: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(s) for s in sources)


DETECTION_PATTERNS: tuple[DetectionPattern, ...] = (
    DetectionPattern(
        permission=Permission.FILESYSTEM_READ,
        patterns=_compile(
            # JavaScript / TypeScript
            r"\breadFile\b",
            r"\breadFileSync\b",
            r"\breaddir\b",
            r"\breaddirSync\b",
            r"\bcreateReadStream\b",
            r"\bfs\.read",
            r"\bfs/promises\b",
            r"\bfsPromises\b",
            r"\bstatSync\b",
            r"\baccessSync\b",
            r"\bexistsSync\b",
            # Python
            r"open\(.+['\"]r['\"]",
            r"\.read_text\(",
            r"\.read_bytes\(",
            r"\bos\.listdir\(",
            r"\bos\.scandir\(",
        ),
        rationale="Source code reads files or directories from the filesystem",
    ),
    DetectionPattern(
        permission=Permission.FILESYSTEM_WRITE,
        patterns=_compile(
            r"\bwriteFile\b",
            r"\bwriteFileSync\b",
            r"\bcreateWriteStream\b",
            r"\bmkdir\b",
            r"\bmkdirSync\b",
            r"\bfs\.write",
            r"\bappendFile\b",
            r"\bcopyFile\b",
            r"\brename\b",
            r"open\(.+['\"][wa]b?['\"]",
            r"\.write_text\(",
            r"\.write_bytes\(",
            r"\bshutil\.copy",
        ),
        rationale="Source code creates or modifies files on the filesystem",
    ),
    DetectionPattern(
        permission=Permission.FILESYSTEM_DELETE,
        patterns=_compile(
            r"\bunlink\b",
            r"\bunlinkSync\b",
            r"\brmSync\b",
            r"\brm\b.*recursive",
            r"\brmdir\b",
            r"\brmdirSync\b",
            r"\bos\.remove\(",
            r"\bshutil\.rmtree\(",
        ),
        rationale="Source code deletes files or directories",
    ),
    DetectionPattern(
        permission=Permission.NETWORK_CLIENT,
        patterns=_compile(
            r"\bfetch\(",
            r"\baxios\b",
            r"\bgot\(",
            r"\bhttps?\.request\b",
            r"\bhttps?\.get\b",
            r"\bnew\s+URL\b",
            r"\bXMLHttpRequest\b",
            r"\bWebSocket\b",
            r"\bnet\.connect\b",
            r"\bnet\.createConnection\b",
            r"\bundici\b",
            r"\brequests\.(?:get|post|put|patch|delete|request)\(",
            r"\bhttpx\b",
            r"\baiohttp\.ClientSession\b",
            r"\burllib\.request\b",
        ),
        rationale="Source code makes outbound network requests",
    ),
    DetectionPattern(
        permission=Permission.NETWORK_SERVER,
        patterns=_compile(
            r"\.listen\(",
            r"\bcreateServer\b",
            r"\bexpress\(\)",
            r"\bfastify\b",
            r"\bhono\b",
            r"\bkoa\b",
            r"\bSSEServer\b",
            r"\bStreamableHTTPServer\b",
            r"\buvicorn\.run\(",
            r"\basyncio\.start_server\(",
            r"\bHTTPServer\(",
        ),
        rationale="Source code listens for inbound connections",
    ),
    DetectionPattern(
        permission=Permission.SYSTEM_ENV_READ,
        patterns=_compile(
            r"process\.env\b",
            r"\bDeno\.env\b",
            r"\bdotenv\b",
            r"\bconfig\(\)",
            r"\benv\[",
            r"\bos\.environ\b",
            r"\bos\.getenv\(",
        ),
        rationale="Source code reads environment variables or configuration",
    ),
    DetectionPattern(
        permission=Permission.SYSTEM_EXEC,
        patterns=_compile(
            r"\bexec\(",
            r"\bexecSync\b",
            r"\bexecFile\b",
            r"\bspawn\(",
            r"\bspawnSync\b",
            r"\bchild_process\b",
            r"\bshelljs\b",
            r"\bexeca\b",
            r"\bsubprocess\.(?:run|Popen|call|check_call|check_output)\(",
            r"\bos\.system\(",
        ),
        rationale="Source code executes child processes or shell commands",
    ),
)


@dataclass
class DetectionResult:
    """A permission suggested by source analysis."""

    permission: Permission
    rationale: str
    match_count: int


def detect_permissions(source_code: str) -> list[DetectionResult]:
    """Scan *source_code* and return detected permissions with match counts.

    Results follow vocabulary order and include only permissions with at
    least one match.
    """
    results: list[DetectionResult] = []
    for pattern in DETECTION_PATTERNS:
        match_count = sum(len(regex.findall(source_code)) for regex in pattern.patterns)
        if match_count > 0:
            results.append(
                DetectionResult(
                    permission=pattern.permission,
                    rationale=pattern.rationale,
                    match_count=match_count,
                )
            )
    return results
