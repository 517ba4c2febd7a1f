# Commy CLI Commands
"""
コマンドモジュールのエクスポート
"""

from commy.cli.commands.config_cmd import config_app

__all__ = [
    "config_app",
]
