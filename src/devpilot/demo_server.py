"""FastAPI demo server serving a static project analysis.

A self-contained fixture for trying out a dashboard: the payload below is
canned data, not the result of analysing anything.
"""

import html
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

DEFAULT_PORT = 3001


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


DEMO_ANALYSIS = {
    "project": "devpilot demo",
    "timestamp": _now(),
    "metrics": {
        "totalFiles": 142,
        "linesOfCode": 15420,
        "maintainabilityIndex": 72,
        "testCoverage": 78,
        "issues": 12,
        "technicalDebt": 180,
    },
    "issues": [
        {"type": "complexity", "severity": "high", "file": "src/services/user.ts", "line": 45},
        {"type": "duplication", "severity": "medium", "file": "src/utils/validation.ts", "line": 12},
        {"type": "security", "severity": "high", "file": "package.json", "description": "Vulnerable dependency detected"},
    ],
    "recommendations": [
        "Refactor UserService to reduce complexity",
        "Extract duplicate validation logic",
        "Update vulnerable dependencies",
    ],
}

app = FastAPI(title="devpilot demo", version="0.1.0")


@app.middleware("http")
async def allow_any_origin(request: Request, call_next):
    response = await call_next(request)
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response


@app.exception_handler(StarletteHTTPException)
async def not_found(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse({"error": "Endpoint not found"}, status_code=404)
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


def _issue_text(issue: dict) -> str:
    if issue.get("description"):
        return issue["description"]
    return f"Found in {issue['file']}:{issue.get('line', '')}"


def render_dashboard(analysis: dict, port: int = DEFAULT_PORT) -> str:
    """Render the analysis payload as a single HTML page."""
    esc = html.escape
    metrics = analysis["metrics"]
    metric_cards = "".join(
        f'<div class="metric"><div class="metric-value">{esc(value)}</div>'
        f'<div class="metric-label">{esc(label)}</div></div>'
        for value, label in [
            (str(metrics["totalFiles"]), "Total Files"),
            (f"{metrics['linesOfCode']:,}", "Lines of Code"),
            (str(metrics["maintainabilityIndex"]), "Maintainability"),
            (f"{metrics['testCoverage']}%", "Test Coverage"),
        ]
    )
    issues = "".join(
        f'<div class="issue"><strong>{esc(issue["type"].upper())}</strong> ({esc(issue["severity"])}): '
        f'{esc(_issue_text(issue))}</div>'
        for issue in analysis["issues"]
    )
    recommendations = "".join(
        f'<div class="recommendation">{esc(rec)}</div>' for rec in analysis["recommendations"]
    )
    endpoints = "".join(
        f'<li><a href="{path}" class="api-link">{path}</a> - {label}</li>'
        for path, label in [
            ("/api/analysis", "Full analysis data"),
            ("/api/metrics", "Project metrics only"),
            ("/api/issues", "Issues list"),
            ("/api/health", "Health check"),
        ]
    )
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>{esc(analysis["project"])}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 40px; background: #f5f5f5; }}
        .container {{ max-width: 800px; margin: 0 auto; background: white; padding: 30px; border-radius: 8px; }}
        .metric {{ display: inline-block; margin: 10px; padding: 15px; background: #f8f9fa; border-radius: 6px; min-width: 120px; text-align: center; }}
        .metric-value {{ font-size: 24px; font-weight: bold; color: #007bff; }}
        .metric-label {{ font-size: 12px; color: #666; margin-top: 5px; }}
        .issue {{ padding: 10px; margin: 10px 0; border-left: 4px solid #dc3545; background: #f8d7da; }}
        .recommendation {{ padding: 10px; margin: 10px 0; border-left: 4px solid #28a745; background: #d4edda; }}
        .status {{ color: #28a745; font-weight: bold; }}
        .api-link {{ color: #007bff; text-decoration: none; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>{esc(analysis["project"])}</h1>
        <p class="status">Demo server is running.</p>
        <h2>Project Metrics</h2>
        <div class="metrics">{metric_cards}</div>
        <h2>Issues Found</h2>
        {issues}
        <h2>Recommendations</h2>
        {recommendations}
        <h2>API Endpoints</h2>
        <ul>{endpoints}</ul>
        <p><em>Demo running on port {port} - press Ctrl+C in the terminal to stop</em></p>
    </div>
</body>
</html>
"""


# ── Routes ───────────────────────────────────────────────────────


@app.get("/")
async def index(request: Request):
    """Serve the dashboard."""
    port = request.url.port or DEFAULT_PORT
    return HTMLResponse(render_dashboard(DEMO_ANALYSIS, port))


@app.get("/api/analysis")
async def get_analysis():
    return DEMO_ANALYSIS


@app.get("/api/metrics")
async def get_metrics():
    return DEMO_ANALYSIS["metrics"]


@app.get("/api/issues")
async def get_issues():
    return DEMO_ANALYSIS["issues"]


@app.get("/api/health")
async def health():
    return {"status": "healthy", "timestamp": _now()}
