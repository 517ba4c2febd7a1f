# Commy CLI - Main Application
"""
Commy CLI
メインアプリケーション構造
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# === アプリケーション初期化 ===

app = typer.Typer(
    name="commy",
    help="Commy - Git activity reports rewritten by AI",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


# === 統計範囲 ===

class StatsOption(str, Enum):
    """貢献者統計の範囲"""
    window = "window"
    history = "history"
    none = "none"


# === ユーティリティ関数 ===

def configure_logging(verbose: bool = False) -> None:
    """ロギング設定（stderrに出力）"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )
    # HTTPクライアントのリクエストログは冗長なので抑制
    logging.getLogger("httpx").setLevel(logging.WARNING)

    from commy.errors import ErrorHandlerConfig, create_error_handler

    # 詳細モードでは回復したエラーのスタックトレースも出力
    create_error_handler(ErrorHandlerConfig(include_stack_trace=verbose))


def load_env_file(env_file: Optional[Path] = None) -> None:
    """.env を環境変数に読み込む（既存の値は上書きしない）"""
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))


def get_config_manager(config_path: Optional[Path] = None):
    """ConfigManagerを取得

    Args:
        config_path: 設定ファイルパス（Noneの場合は既定の場所を探索）

    Returns:
        ConfigManager: 読み込み済みマネージャー
    """
    from commy.api import ConfigManager

    search_paths = [
        config_path,
        Path("./commy.yaml"),
        Path("./commy.yml"),
        Path("./config/commy.yaml"),
    ]

    for path in search_paths:
        if path and path.exists():
            return ConfigManager.from_yaml(path)

    return ConfigManager()


def print_error(message: str):
    """エラーメッセージを表示"""
    console.print(f"[red]✗ Error:[/red] {message}")


def print_success(message: str):
    """成功メッセージを表示"""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str):
    """警告メッセージを表示"""
    console.print(f"[yellow]⚠[/yellow] {message}")


# === バージョンコマンド ===

@app.command()
def version():
    """Show version information"""
    from commy import __version__

    console.print(Panel.fit(
        f"[bold cyan]Commy[/bold cyan] v{__version__}\n"
        "[dim]Git activity reports rewritten by AI[/dim]",
        border_style="cyan"
    ))


# === providersコマンド ===

@app.command()
def providers(
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", help=".env file to load"
    ),
):
    """List supported AI providers and their credential variables"""
    import os

    from commy.providers import ProviderRegistry

    load_env_file(env_file)
    registry = ProviderRegistry()

    table = Table(title="AI Providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Aliases")
    table.add_column("API key variable")
    table.add_column("Status")

    for descriptor in registry.list_supported():
        is_set = bool(os.environ.get(descriptor.credential_env_var))
        table.add_row(
            descriptor.id.value,
            descriptor.display_name,
            ", ".join(descriptor.aliases) or "-",
            descriptor.credential_env_var,
            "[green]Set[/green]" if is_set else "[dim]Not set[/dim]",
        )

    console.print(table)


# === reportコマンド ===

@app.command()
def report(
    repo: Optional[Path] = typer.Option(
        None, "--repo", "-r", help="Git repository to analyse (env: FOLDER)"
    ),
    days: Optional[int] = typer.Option(
        None, "--days", "-d", min=0, help="Number of days to look back (env: LAST_DAY)"
    ),
    author: Optional[str] = typer.Option(
        None, "--author", "-a", help="Keep authors whose name contains this text (env: AUTHOR)"
    ),
    provider: Optional[str] = typer.Option(
        None, "--provider", "-p", help="AI provider: mistral, openai, gemini, claude (env: AI_PROVIDER)"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", "-k", help="Provider API key (defaults to the provider's env variable)"
    ),
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="Override the provider's default model"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Report file (default: tasks.md)"
    ),
    stats: Optional[StatsOption] = typer.Option(
        None, "--stats", help="Contributor statistics scope"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file path"
    ),
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", help=".env file to load"
    ),
    print_report: bool = typer.Option(
        False, "--stdout", help="Print the report instead of writing it to a file"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
):
    """Generate an activity report from recent commits

    Examples:
        commy report --repo ../my-project --days 14
        commy report --provider claude --author alice --stdout
    """
    from commy.api import Commy
    from commy.errors import CommyError

    configure_logging(verbose)
    load_env_file(env_file)

    try:
        manager = get_config_manager(config)
        manager.apply_env()
        cfg = manager.override(
            repository=repo,
            days=days,
            author=author,
            provider=provider,
            api_key=api_key,
            model=model,
            output_path=output,
            stats_scope=stats.value if stats else None,
        )

        commy = Commy(cfg)

        with console.status("[bold green]Generating report...", spinner="dots"):
            result = commy.run(write=not print_report)

    except CommyError as e:
        print_error(e.message)
        raise typer.Exit(1)

    info = result.repository_info
    console.print(f"📡 Branch: {info.current_branch}")
    console.print(f"🔗 Remote: {info.remote_url}")
    console.print(f"🤖 Provider: {result.provider}")
    console.print(f"📊 {result.commit_count} commits, {result.author_count} contributors")

    if result.commit_count == 0:
        print_warning("No commits found for the selected period")

    if result.degraded_authors:
        print_warning(
            "Raw commit list used for: " + ", ".join(result.degraded_authors)
        )

    error_counts = result.error_stats.get("error_counts", {})
    if error_counts:
        summary = ", ".join(f"{name} x{count}" for name, count in error_counts.items())
        print_warning(f"Recovered errors: {summary}")

    if print_report:
        typer.echo(result.report)
    else:
        print_success(f"Report written to {result.output_path}")


# === サブコマンドのアタッチ ===

def attach_commands():
    """サブコマンドをアタッチ"""
    from commy.cli.commands import config_app

    app.add_typer(config_app, name="config")


attach_commands()
