# Commy CLI - Config Commands
"""
Commy CLI - config コマンド群
設定ファイルの生成・表示・検証
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from commy.cli.main import print_error, print_success, print_warning

console = Console()
config_app = typer.Typer(help="Configuration commands")


# デフォルト設定テンプレート
DEFAULT_CONFIG = """# Commy Configuration File
# Git activity reports rewritten by AI

# ======================================
# Repository
# ======================================

# Git repository to analyse (env: FOLDER)
repository: .

# Number of days to look back (env: LAST_DAY)
days: 7

# Keep only authors whose name contains this text (env: AUTHOR)
# author: alice

# ======================================
# AI Provider
# ======================================

# Provider: mistral, openai, gemini, claude (env: AI_PROVIDER)
# API keys are read from MISTRAL_API_KEY, OPENAI_API_KEY,
# GEMINI_API_KEY or CLAUDE_API_KEY (a .env file is loaded)
provider: mistral

# Override the provider's default model
# model: mistral-small-latest

# Output language of the rewritten tasks: fr or en
language: fr

# Request timeout in seconds
timeout: 60.0

# ======================================
# Report
# ======================================

# Date format (strftime)
date_format: "%d/%m/%Y"

# Report file
output_path: tasks.md

# Contributor statistics: window, history or none
stats_scope: window
"""

CONFIG_CANDIDATES = [
    Path("./commy.yaml"),
    Path("./commy.yml"),
    Path("./config/commy.yaml"),
]


@config_app.command("init")
def config_init(
    output_path: Path = typer.Option(
        Path("./commy.yaml"),
        "--output", "-o",
        help="Output path for config file",
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite existing file"
    ),
):
    """Initialize a new configuration file"""

    if output_path.exists() and not force:
        print_warning(f"Config file already exists: {output_path}")
        console.print("Use --force to overwrite")
        raise typer.Exit(1)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(DEFAULT_CONFIG)

        print_success(f"Configuration file created: {output_path}")
        console.print("\nThen generate a report:")
        console.print("  [cyan]commy report[/cyan]")

    except OSError as e:
        print_error(f"Failed to create config file: {e}")
        raise typer.Exit(1)


@config_app.command("show")
def config_show(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file path"
    ),
):
    """Show current configuration file"""

    config_path = config
    if config_path is None:
        config_path = next((c for c in CONFIG_CANDIDATES if c.exists()), None)

    if config_path is None or not config_path.exists():
        print_warning("No configuration file found")
        console.print("\nCreate one with:")
        console.print("  [cyan]commy config init[/cyan]")
        raise typer.Exit(1)

    content = config_path.read_text(encoding="utf-8")
    syntax = Syntax(content, "yaml", theme="monokai", line_numbers=True)
    console.print(Panel(
        syntax,
        title=str(config_path),
        border_style="cyan",
    ))


@config_app.command("validate")
def config_validate(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file path"
    ),
):
    """Validate configuration file and provider credentials"""
    from commy.api import ConfigManager
    from commy.errors import CommyError

    config_path = config
    if config_path is None:
        config_path = next((c for c in CONFIG_CANDIDATES if c.exists()), None)

    if config_path is None or not config_path.exists():
        print_error(f"Config file not found: {config or CONFIG_CANDIDATES[0]}")
        raise typer.Exit(1)

    try:
        manager = ConfigManager.from_yaml(config_path)
        cfg = manager.config

        from commy.providers import ProviderRegistry

        registry = ProviderRegistry()
        descriptor = registry.resolve(cfg.provider)
        has_key = bool(manager.resolve_api_key(registry))
    except CommyError as e:
        print_error(f"Configuration error: {e.message}")
        raise typer.Exit(1)

    table = Table(title="Configuration Validation")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Repository", str(cfg.repository))
    table.add_row("Days", str(cfg.days))
    table.add_row("Author filter", cfg.author or "-")
    table.add_row("Provider", descriptor.display_name)
    table.add_row("Model", cfg.model or "(default)")
    table.add_row("Language", cfg.language)
    table.add_row("Output", str(cfg.output_path))
    table.add_row("Stats", cfg.stats_scope.value)
    table.add_row(
        descriptor.credential_env_var,
        "[green]Set[/green]" if has_key else "[yellow]Not set[/yellow]",
    )

    console.print(table)
    print_success("Configuration is valid")
