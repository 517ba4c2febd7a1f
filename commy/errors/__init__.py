"""Commy Error Handling Framework.

パイプライン全体で共通のエラー型と、回復したエラーのログ記録を提供。

エラーの伝播方針:
    - RepositoryError: コミット取得元が使えない。実行全体が失敗する。
    - UnsupportedProviderError / ConfigurationError: 作業開始前に失敗する。
    - ProviderError: 1人の著者の再構成が失敗。フォールバックで回復する。

Example:
    >>> from commy.errors import ProviderError, ErrorHandler
    >>>
    >>> handler = ErrorHandler()
    >>> try:
    ...     raise ProviderError("Service unavailable", http_status=503, provider="mistral")
    ... except ProviderError as e:
    ...     handler.handle(e, component="orchestrator", reraise=False)
"""

from __future__ import annotations

import logging
import time
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

__all__ = [
    # Base exceptions
    "CommyError",
    "ConfigurationError",
    "ConfigError",
    "UnsupportedProviderError",
    "RepositoryError",
    "ProviderError",
    # Error context
    "ErrorContext",
    "ErrorSeverity",
    # Error handler
    "ErrorHandlerConfig",
    "ErrorHandler",
    "create_error_handler",
    "get_error_handler",
]


# ============================================================
# Error Severity
# ============================================================


class ErrorSeverity(str, Enum):
    """エラー重要度"""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_logging_level(self) -> int:
        """ロギングレベルに変換"""
        mapping = {
            ErrorSeverity.DEBUG: logging.DEBUG,
            ErrorSeverity.INFO: logging.INFO,
            ErrorSeverity.WARNING: logging.WARNING,
            ErrorSeverity.ERROR: logging.ERROR,
            ErrorSeverity.CRITICAL: logging.CRITICAL,
        }
        return mapping[self]


# ============================================================
# Error Context
# ============================================================


@dataclass
class ErrorContext:
    """エラーコンテキスト情報

    Attributes:
        error_id: ユニークなエラーID
        timestamp: エラー発生時刻
        component: エラー発生コンポーネント
        operation: 実行中の操作
        details: 追加の詳細情報
        stack_trace: スタックトレース
    """

    error_id: str = field(default_factory=lambda: f"err_{int(time.time() * 1000)}")
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    component: str | None = None
    operation: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    stack_trace: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換"""
        return {
            "error_id": self.error_id,
            "timestamp": self.timestamp.isoformat(),
            "component": self.component,
            "operation": self.operation,
            "details": self.details,
            "stack_trace": self.stack_trace,
        }


# ============================================================
# Base Exception Classes
# ============================================================


class CommyError(Exception):
    """Commy基底例外クラス

    すべてのCommy例外の基底クラス。
    構造化されたエラー情報を提供。

    Attributes:
        message: エラーメッセージ
        code: エラーコード
        severity: エラー重要度
        context: エラーコンテキスト
        cause: 原因となった例外
    """

    default_code: str = "COMMY_ERROR"
    default_severity: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        severity: ErrorSeverity | None = None,
        cause: Exception | None = None,
        component: str | None = None,
        operation: str | None = None,
        **details: Any,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.severity = severity or self.default_severity
        self.cause = cause

        self.context = ErrorContext(
            component=component,
            operation=operation,
            details=details,
            stack_trace=traceback.format_exc() if cause else None,
        )

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.context.component:
            parts.append(f"(component: {self.context.component})")
        if self.context.operation:
            parts.append(f"(operation: {self.context.operation})")
        if self.cause:
            parts.append(f"caused by: {self.cause}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"severity={self.severity.value!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "severity": self.severity.value,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        **kwargs: Any,
    ) -> "CommyError":
        """既存の例外からCommyErrorを作成"""
        return cls(
            message=message or str(exc),
            cause=exc,
            **kwargs,
        )


# ============================================================
# Specific Exception Classes
# ============================================================


class ConfigurationError(CommyError):
    """設定エラー

    APIキー未設定など、ネットワーク呼び出し前に検出される設定不備。
    """

    default_code = "CONFIG_ERROR"
    default_severity = ErrorSeverity.ERROR


ConfigError = ConfigurationError


class UnsupportedProviderError(ConfigurationError):
    """未対応プロバイダーエラー

    メッセージには既知のプロバイダーIDがすべて列挙される。
    """

    default_code = "UNSUPPORTED_PROVIDER"

    def __init__(
        self,
        provider: str,
        supported: list[str],
        **kwargs: Any,
    ):
        message = (
            f"Provider '{provider}' is not supported. "
            f"Available providers: {', '.join(supported)}"
        )
        super().__init__(message, **kwargs)
        self.provider = provider
        self.supported = list(supported)
        self.context.details["provider"] = provider


class RepositoryError(CommyError):
    """リポジトリエラー

    指定パスがGitの作業ツリーでない、またはgitコマンドが失敗した場合。
    """

    default_code = "REPOSITORY_ERROR"
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        repository: str | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.repository = repository
        self.returncode = returncode
        self.stderr = stderr
        if repository:
            self.context.details["repository"] = repository
        if returncode is not None:
            self.context.details["returncode"] = returncode


class ProviderError(CommyError):
    """プロバイダーエラー

    テキスト生成APIの呼び出しに失敗した場合。
    http_status は通信エラー時に 0 となる。
    """

    default_code = "PROVIDER_ERROR"
    default_severity = ErrorSeverity.WARNING

    def __init__(
        self,
        message: str,
        http_status: int = 0,
        provider: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.http_status = http_status
        self.provider = provider
        self.context.details["http_status"] = http_status
        if provider:
            self.context.details["provider"] = provider


# ============================================================
# Error Handler
# ============================================================


@dataclass
class ErrorHandlerConfig:
    """エラーハンドラ設定"""

    log_errors: bool = True
    include_stack_trace: bool = False


class ErrorHandler:
    """統合エラーハンドラ

    エラーのログ記録、変換、集約を管理。

    Example:
        >>> handler = ErrorHandler()
        >>>
        >>> try:
        ...     risky_operation()
        ... except Exception as e:
        ...     handler.handle(e, component="orchestrator", operation="reformulate")
    """

    def __init__(
        self,
        config: ErrorHandlerConfig | None = None,
        logger: logging.Logger | None = None,
    ):
        self.config = config or ErrorHandlerConfig()
        self.logger = logger or logging.getLogger("commy.errors")

        self._error_counts: dict[str, int] = {}

    def handle(
        self,
        error: Exception,
        component: str | None = None,
        operation: str | None = None,
        reraise: bool = True,
        **context: Any,
    ) -> CommyError:
        """エラーを処理

        Args:
            error: 処理するエラー
            component: コンポーネント名
            operation: 操作名
            reraise: エラーを再送出するか
            **context: 追加のコンテキスト

        Returns:
            変換されたCommyError

        Raises:
            CommyError: reraise=Trueの場合
        """
        if isinstance(error, CommyError):
            commy_error = error
            if component:
                commy_error.context.component = component
            if operation:
                commy_error.context.operation = operation
            commy_error.context.details.update(context)
        else:
            commy_error = CommyError.from_exception(
                error,
                component=component,
                operation=operation,
                **context,
            )

        if self.config.log_errors:
            self._log_error(commy_error)

        error_type = commy_error.__class__.__name__
        self._error_counts[error_type] = self._error_counts.get(error_type, 0) + 1

        if reraise:
            raise commy_error

        return commy_error

    def _log_error(self, error: CommyError) -> None:
        """エラーをログ記録"""
        level = error.severity.to_logging_level()

        message = str(error)
        if self.config.include_stack_trace and error.context.stack_trace:
            message += f"\n{error.context.stack_trace}"

        self.logger.log(level, message, extra={"error": error.to_dict()})

    def get_stats(self) -> dict[str, Any]:
        """エラー統計を取得"""
        return {
            "error_counts": dict(self._error_counts),
            "total_errors": sum(self._error_counts.values()),
        }

    def clear_stats(self) -> None:
        """統計をクリア"""
        self._error_counts.clear()


# Global error handler
_default_handler: ErrorHandler | None = None


def create_error_handler(
    config: ErrorHandlerConfig | None = None,
    logger: logging.Logger | None = None,
) -> ErrorHandler:
    """エラーハンドラを作成"""
    global _default_handler
    _default_handler = ErrorHandler(config=config, logger=logger)
    return _default_handler


def get_error_handler() -> ErrorHandler:
    """グローバルエラーハンドラを取得"""
    global _default_handler
    if _default_handler is None:
        _default_handler = ErrorHandler()
    return _default_handler
