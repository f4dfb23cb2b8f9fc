"""AI-powered development commands: ``devpilot ai <subcommand>``.

Each Click command is a thin shell around a dispatcher function that takes
the ``AppContext`` explicitly. The dispatcher functions run inside
``wrap_errors`` so any failure reaches the operator as ``AI_<KIND>_FAILED``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

import click

from ..backends import DEFAULT_PROVIDER, PROVIDERS, available_providers
from ..context import AppContext
from ..core import Session, new_session
from ..errors import wrap_errors
from ..export import session_to_json, session_to_markdown
from ..operations import (
    AnalysisResult,
    AnalyzeParams,
    DocsParams,
    GenerateParams,
    Operation,
    OptimizeParams,
    RefactorParams,
    ReviewParams,
    ReviewResult,
    TestParams,
    severity_rank,
)
from ..session import ChatLoop
from ..workspace import (
    apply_changes,
    changed_files,
    docs_output_path,
    format_benchmark_comparison,
    generated_test_path,
    load_context,
    read_source,
    run_benchmark,
    save_text,
)

logger = logging.getLogger(__name__)


def _success(message: str) -> None:
    click.secho(message, fg="green")


def _resolve(app: AppContext, path: str) -> Path:
    p = Path(path)
    return p if p.is_absolute() else app.cwd / p


def prompt_required(message: str, error: str) -> str:
    """Prompt until the operator enters something non-empty."""
    while True:
        value = click.prompt(message, default="", show_default=False)
        if value.strip():
            return value
        click.echo(error)


# ── Dispatcher functions ─────────────────────────────────────────


def generate_code(
    app: AppContext,
    type_: str,
    prompt: Optional[str] = None,
    template: Optional[str] = None,
    context: Optional[str] = None,
    output: Optional[str] = None,
) -> str:
    with wrap_errors("GENERATE", type=type_, prompt=prompt, template=template, context=context, output=output):
        click.echo(f"Generating {click.style(type_, fg='cyan')} code...")

        prompt = prompt or prompt_required(f"Describe the {type_} you want to generate", "Prompt is required")
        context_text = load_context(_resolve(app, context)) if context else ""

        code = app.get_provider().invoke(
            Operation.GENERATE,
            GenerateParams(type=type_, prompt=prompt, context=context_text, template=template),
        )

        if output:
            save_text(code, _resolve(app, output))
            _success(f"Code generated and saved to {output}")
        else:
            click.secho("\nGenerated Code:", fg="green")
            click.echo(code)
        return code


def review_code(
    app: AppContext,
    files: Sequence[str],
    focus: str = "all",
    severity: str = "info",
    suggest_fixes: bool = False,
) -> list[tuple[str, ReviewResult]]:
    with wrap_errors("REVIEW", files=list(files), focus=focus, severity=severity):
        click.echo("Starting AI code review...")

        files_to_review = list(files) or changed_files(app.cwd)
        if not files_to_review:
            click.echo("No changed files to review.")
            return []

        provider = app.get_provider()
        results = []
        for file in files_to_review:
            logger.debug("Reviewing %s...", file)
            review = provider.invoke(
                Operation.REVIEW,
                ReviewParams(code=read_source(_resolve(app, file)), file=file, focus=focus, severity=severity),
            )
            results.append((file, review))

        display_review_results(results, severity)
        if suggest_fixes:
            display_fix_suggestions(results)
        return results


def refactor_code(
    app: AppContext,
    target: str,
    type_: str = "optimize",
    scope: str = "function",
    dry_run: bool = False,
):
    with wrap_errors("REFACTOR", target=target, type=type_, scope=scope, dry_run=dry_run):
        click.echo(f"Refactoring {click.style(target, fg='cyan')}...")

        path = _resolve(app, target)
        plan = app.get_provider().invoke(
            Operation.REFACTOR,
            RefactorParams(code=read_source(path), target=target, type=type_, scope=scope),
        )

        if dry_run:
            click.echo("Refactoring Plan:")
            click.echo(plan.description)
            click.echo("\nProposed Changes:")
            for i, change in enumerate(plan.changes, 1):
                click.echo(f"{i}. {change.description}")
            return plan

        if click.confirm("Apply refactoring changes?", default=False):
            apply_changes(path, plan.changes)
            _success(f"Refactoring applied to {target}")
        return plan


def generate_docs(
    app: AppContext,
    target: str,
    type_: str = "api",
    format_: str = "markdown",
    include_examples: bool = False,
) -> Path:
    with wrap_errors("DOCS", target=target, type=type_, format=format_, include_examples=include_examples):
        click.echo(f"Generating {type_} documentation for {click.style(target, fg='cyan')}...")

        docs = app.get_provider().invoke(
            Operation.DOCS,
            DocsParams(
                code=read_source(_resolve(app, target)),
                target=target,
                type=type_,
                format=format_,
                include_examples=include_examples,
            ),
        )

        output_path = docs_output_path(target, type_, format_)
        save_text(docs, _resolve(app, str(output_path)))
        _success(f"Documentation generated: {output_path}")
        return output_path


def generate_tests(
    app: AppContext,
    target: str,
    framework: str = "jest",
    coverage: str = "unit",
    mocks: bool = False,
) -> Path:
    with wrap_errors("TEST", target=target, framework=framework, coverage=coverage, mocks=mocks):
        click.echo(f"Generating tests for {click.style(target, fg='cyan')}...")

        tests = app.get_provider().invoke(
            Operation.TEST,
            TestParams(
                code=read_source(_resolve(app, target)),
                target=target,
                framework=framework,
                coverage=coverage,
                mocks=mocks,
            ),
        )

        test_path = generated_test_path(target, framework)
        save_text(tests, _resolve(app, str(test_path)))
        _success(f"Tests generated: {test_path}")
        return test_path


def start_chat_session(
    app: AppContext,
    model: Optional[str] = None,
    context: Optional[str] = None,
    session_id: Optional[str] = None,
    read_input=None,
) -> Session:
    with wrap_errors("CHAT", model=model, context=context, session=session_id):
        click.echo("Starting AI chat session...")

        resumed = bool(session_id) and app.sessions.exists(session_id)
        if session_id:
            session = app.sessions.load(session_id)
            # Flags given on resume override what the stored session had.
            if model:
                session.model = model
            if context:
                session.context = context
        else:
            session = new_session(model or app.default_model, context)

        def save_session(finished: Session) -> None:
            if finished.history or resumed:
                app.sessions.save(finished)
            else:
                logger.debug("Not saving empty session %s", finished.id)

        loop = ChatLoop(
            session,
            app.get_provider(),
            read_input=read_input or (lambda message: click.prompt(message, default="", show_default=False, prompt_suffix=" ")),
            echo=click.echo,
            on_exit=save_session,
        )
        loop.run()
        _success("Chat session ended")
        return session


def analyze_code(
    app: AppContext,
    target: str,
    aspect: str = "all",
    suggestions: bool = False,
) -> AnalysisResult:
    with wrap_errors("ANALYZE", target=target, aspect=aspect, suggestions=suggestions):
        click.echo(f"Analyzing {click.style(target, fg='cyan')}...")

        analysis = app.get_provider().invoke(
            Operation.ANALYZE,
            AnalyzeParams(code=read_source(_resolve(app, target)), target=target, aspect=aspect, suggestions=suggestions),
        )
        display_analysis_results(analysis)
        return analysis


def optimize_code(
    app: AppContext,
    target: str,
    focus: str = "speed",
    benchmarks: bool = False,
):
    with wrap_errors("OPTIMIZE", target=target, focus=focus, benchmarks=benchmarks):
        click.echo(f"Optimizing {click.style(target, fg='cyan')}...")

        path = _resolve(app, target)
        command = app.config.get("ai.benchmark_command")
        before = run_benchmark(path, command) if benchmarks else None

        optimization = app.get_provider().invoke(
            Operation.OPTIMIZE,
            OptimizeParams(code=read_source(path), target=target, focus=focus),
        )
        click.echo(optimization.description)
        for i, change in enumerate(optimization.changes, 1):
            click.echo(f"{i}. {change.description}")

        if click.confirm("Apply optimization changes?", default=False):
            apply_changes(path, optimization.changes)
            if before is not None:
                after = run_benchmark(path, command)
                click.secho("\nBenchmark Comparison:", fg="blue")
                for line in format_benchmark_comparison(before, after):
                    click.echo(line)
            _success(f"Code optimized: {target}")
        return optimization


def set_ai_config(app: AppContext, key: str, value: str) -> None:
    with wrap_errors("CONFIG_SET", key=key, value=value):
        app.config.set(f"ai.{key}", value)
        app.config.save()
        _success(f"AI configuration updated: {key} = {value}")


def get_ai_config(app: AppContext, key: Optional[str] = None) -> Any:
    with wrap_errors("CONFIG_GET", key=key):
        if key:
            value = app.config.get(f"ai.{key}")
            if isinstance(value, (dict, list)):
                value_text = json.dumps(value, indent=2)
            else:
                value_text = "(not set)" if value is None else str(value)
            click.echo(f"{key}: {value_text}")
            return value

        ai_config = app.config.get("ai", {})
        click.echo(json.dumps(ai_config, indent=2))
        return ai_config


# ── Display ──────────────────────────────────────────────────────


def display_review_results(results: list[tuple[str, ReviewResult]], min_severity: str = "info") -> None:
    threshold = severity_rank(min_severity)
    click.secho("\nCode Review Results:", fg="blue")
    for file, review in results:
        click.echo(f"\n{click.style(file, fg='cyan')} (Score: {review.score}/100)")
        for issue in review.issues:
            if severity_rank(issue.severity) < threshold:
                continue
            where = f" (line {issue.line})" if issue.line is not None else ""
            click.echo(f"  {issue.severity}: {issue.description}{where}")


def display_fix_suggestions(results: list[tuple[str, ReviewResult]]) -> None:
    click.echo("Generating fix suggestions...")
    found = False
    for file, review in results:
        fixes = [i.suggestion for i in review.issues if i.suggestion] + list(review.suggestions)
        if not fixes:
            continue
        found = True
        click.echo(f"\n{click.style(file, fg='cyan')}")
        for fix in fixes:
            click.echo(f"  - {fix}")
    if not found:
        click.echo("No fixes suggested.")


def display_analysis_results(analysis: AnalysisResult) -> None:
    click.secho("\nCode Analysis Results:", fg="blue")
    click.echo(f"Complexity: {analysis.complexity}")
    click.echo(f"Maintainability: {analysis.maintainability}")

    if analysis.suggestions:
        click.echo("\nSuggestions:")
        for i, suggestion in enumerate(analysis.suggestions, 1):
            click.echo(f"{i}. {suggestion}")


# ── Click commands ───────────────────────────────────────────────


class AliasedGroup(click.Group):
    """A Click group that also resolves short aliases (``gen``, ``c``)."""

    aliases = {"gen": "generate", "c": "chat"}

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


pass_app = click.make_pass_decorator(AppContext)


@click.group(cls=AliasedGroup)
def ai():
    """AI-powered development features."""
    pass


@ai.command()
@click.argument("type_", metavar="TYPE")
@click.option("--prompt", help="Generation prompt.")
@click.option("--template", help="Use specific template.")
@click.option("--context", help="Include context from path.")
@click.option("--output", help="Output file path.")
@pass_app
def generate(app, type_, prompt, template, context, output):
    """Generate code using AI (alias: gen)."""
    generate_code(app, type_, prompt, template, context, output)


@ai.command()
@click.argument("files", nargs=-1)
@click.option("--focus", default="all", show_default=True, help="Review focus (security, performance, style).")
@click.option("--severity", default="info", show_default=True, type=click.Choice(["info", "warning", "error", "critical"]),
              help="Minimum issue severity.")
@click.option("--suggest-fixes", is_flag=True, help="Suggest fixes for issues.")
@pass_app
def review(app, files, focus, severity, suggest_fixes):
    """AI-powered code review of FILES (default: files changed in git)."""
    review_code(app, files, focus, severity, suggest_fixes)


@ai.command()
@click.argument("target")
@click.option("--type", "type_", default="optimize", show_default=True, help="Refactoring type (extract, rename, optimize).")
@click.option("--scope", default="function", show_default=True, help="Refactoring scope (function, class, file).")
@click.option("--dry-run", is_flag=True, help="Show refactoring plan without applying.")
@pass_app
def refactor(app, target, type_, scope, dry_run):
    """AI-assisted code refactoring."""
    refactor_code(app, target, type_, scope, dry_run)


@ai.command()
@click.argument("target")
@click.option("--type", "type_", default="api", show_default=True, help="Documentation type (api, readme, comments).")
@click.option("--format", "format_", default="markdown", show_default=True, help="Output format (markdown, html, json).")
@click.option("--include-examples", is_flag=True, help="Include code examples.")
@pass_app
def docs(app, target, type_, format_, include_examples):
    """Generate documentation using AI."""
    generate_docs(app, target, type_, format_, include_examples)


@ai.command("test")
@click.argument("target")
@click.option("--framework", default="jest", show_default=True, help="Testing framework (jest, mocha, vitest, pytest).")
@click.option("--coverage", default="unit", show_default=True, help="Coverage level (unit, integration, e2e).")
@click.option("--mocks", is_flag=True, help="Generate mock objects.")
@pass_app
def test_cmd(app, target, framework, coverage, mocks):
    """Generate tests using AI."""
    generate_tests(app, target, framework, coverage, mocks)


@ai.command()
@click.option("--model", help="AI model to use.")
@click.option("--context", help="Include project context.")
@click.option("--session", "session_id", help="Resume existing session.")
@pass_app
def chat(app, model, context, session_id):
    """Start AI chat session (alias: c)."""
    start_chat_session(app, model, context, session_id)


@ai.command()
@click.argument("target")
@click.option("--aspect", default="all", show_default=True, help="Analysis aspect (complexity, maintainability, security).")
@click.option("--suggestions", is_flag=True, help="Include improvement suggestions.")
@pass_app
def analyze(app, target, aspect, suggestions):
    """AI-powered code analysis."""
    analyze_code(app, target, aspect, suggestions)


@ai.command()
@click.argument("target")
@click.option("--focus", default="speed", show_default=True, help="Optimization focus (speed, memory, bundle).")
@click.option("--benchmarks", is_flag=True, help="Run before/after benchmarks.")
@pass_app
def optimize(app, target, focus, benchmarks):
    """AI-powered performance optimization."""
    optimize_code(app, target, focus, benchmarks)


@ai.group()
def config():
    """Configure AI settings."""
    pass


@config.command("set")
@click.argument("key")
@click.argument("value")
@pass_app
def config_set(app, key, value):
    """Set AI configuration."""
    set_ai_config(app, key, value)


@config.command("get")
@click.argument("key", required=False)
@pass_app
def config_get(app, key):
    """Get AI configuration."""
    get_ai_config(app, key)


@ai.command()
@pass_app
def providers(app):
    """List AI provider backends; the configured one is marked with *."""
    current = app.config.get("ai.provider") or DEFAULT_PROVIDER
    available = {p.name for p in available_providers()}
    for name in sorted(PROVIDERS):
        marker = "*" if name == current else " "
        status = "available" if name in available else "unavailable"
        click.echo(f"{marker} {name}  ({status})")


@ai.group()
def sessions():
    """Browse saved chat sessions."""
    pass


@sessions.command("list")
@pass_app
def sessions_list(app):
    """List saved chat sessions, newest first."""
    with wrap_errors("SESSIONS"):
        stored = app.sessions.list()
        if not stored:
            click.echo("No saved chat sessions.")
            return
        for session in stored:
            updated = session.updated.strftime("%Y-%m-%d %H:%M")
            click.echo(f"{click.style(session.id, fg='cyan')}  {updated}  {session.message_count:>3} msgs  {session.title}")


@sessions.command("show")
@click.argument("session_id")
@click.option("--format", "format_", default="md", show_default=True, type=click.Choice(["md", "json"]),
              help="Output format.")
@pass_app
def sessions_show(app, session_id, format_):
    """Print a saved chat session as Markdown or JSON."""
    with wrap_errors("SESSIONS", session_id=session_id):
        if not app.sessions.exists(session_id):
            raise click.ClickException(f"Session not found: {session_id}")
        session = app.sessions.load(session_id)
        click.echo(session_to_json(session) if format_ == "json" else session_to_markdown(session))
