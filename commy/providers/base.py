# Provider Adapter Base
"""
Base class for text-generation provider adapters.

各アダプターは単一の操作 ``reformulate(commits, author)`` を提供する。
共通処理（コミット整形、プロンプト生成、HTTP送信、エラー変換）は
基底クラスで行い、サブクラスはエンドポイント・認証・ペイロード・
レスポンス解析のみを定義する。

リトライやストリーミングは行わない。1リクエスト1レスポンス。
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, ClassVar

import httpx

from commy.commits.models import Commit
from commy.errors import ConfigurationError, ProviderError
from commy.providers.prompts import DEFAULT_LANGUAGE, PROMPTS

logger = logging.getLogger(__name__)


class ProviderAdapter(ABC):
    """プロバイダーアダプター抽象基底クラス

    Example:
        >>> async with MistralAdapter(api_key="...") as adapter:
        ...     text = await adapter.reformulate(commits, "Alice")

    Attributes:
        api_key: 認証情報
        model: 使用するモデル名
        timeout: リクエストタイムアウト（秒、Noneで無制限）
        language: 出力言語（"fr" または "en"）
    """

    provider_id: ClassVar[str] = ""
    display_name: ClassVar[str] = ""
    default_model: ClassVar[str] = ""

    DEFAULT_TIMEOUT = 60.0
    TEMPERATURE = 0.7
    MAX_TOKENS = 1000

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        if language not in PROMPTS:
            raise ConfigurationError(
                f"Unsupported language '{language}'. Available: {', '.join(PROMPTS)}",
                component="provider",
            )
        self.api_key = api_key
        self.model = model or self.default_model
        self.timeout = timeout
        self.language = language
        self._client: httpx.AsyncClient | None = None

    @property
    def model_name(self) -> str:
        """モデル名"""
        return self.model

    # ========== Variant hooks ==========

    @abstractmethod
    def endpoint(self) -> str:
        """リクエスト先URL"""
        ...

    def headers(self) -> dict[str, str]:
        """リクエストヘッダー"""
        return {"Content-Type": "application/json"}

    def params(self) -> dict[str, str]:
        """URLクエリパラメータ"""
        return {}

    @abstractmethod
    def build_payload(self, prompt: str) -> dict[str, Any]:
        """リクエストボディを構築"""
        ...

    @abstractmethod
    def extract_text(self, data: dict[str, Any]) -> str:
        """レスポンスから生成テキストを取り出す"""
        ...

    # ========== Shared behaviour ==========

    def validate_api_key(self) -> None:
        """APIキーの存在を確認

        Raises:
            ConfigurationError: APIキーが未設定の場合
        """
        if not self.api_key:
            raise ConfigurationError(
                f"API key is required for {self.display_name}",
                component="provider",
                provider=self.provider_id,
            )

    @staticmethod
    def format_commits(commits: Sequence[Commit]) -> str:
        """コミットを ``<date>: <message>`` の行に整形（受け取った順）"""
        return "\n".join(f"{commit.date}: {commit.message}" for commit in commits)

    def build_prompt(self, commits: Sequence[Commit], author: str) -> str:
        """再構成の指示プロンプトを生成"""
        return PROMPTS[self.language].format(
            author=author,
            commits=self.format_commits(commits),
        )

    async def reformulate(self, commits: Sequence[Commit], author: str) -> str:
        """著者のコミットリストをタスク記述に書き換える

        Args:
            commits: 著者のコミット
            author: 著者名

        Returns:
            前後の空白を除去した生成テキスト

        Raises:
            ConfigurationError: APIキーが未設定の場合
            ProviderError: 通信失敗、2xx以外のステータス、不正なレスポンスの場合
        """
        self.validate_api_key()

        payload = self.build_payload(self.build_prompt(commits, author))
        client = await self._get_client()

        logger.debug("POST %s (%s, %d commits)", self.provider_id, self.model, len(commits))
        try:
            response = await client.post(
                self.endpoint(),
                headers=self.headers(),
                params=self.params() or None,
                json=payload,
            )
        except httpx.HTTPError as e:
            raise ProviderError(
                f"{self.display_name} request failed: {e}",
                http_status=0,
                provider=self.provider_id,
                cause=e,
                operation="reformulate",
            ) from e

        if not response.is_success:
            raise ProviderError(
                f"{self.display_name} API error: {response.status_code}"
                f"{self._error_detail(response)}",
                http_status=response.status_code,
                provider=self.provider_id,
                operation="reformulate",
            )

        try:
            text = self.extract_text(response.json())
            if not isinstance(text, str):
                raise TypeError(f"expected text, got {type(text).__name__}")
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(
                f"Unexpected {self.display_name} response: {e}",
                http_status=response.status_code,
                provider=self.provider_id,
                cause=e,
                operation="reformulate",
            ) from e

        return text.strip()

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        """エラーレスポンスからメッセージを取り出す（なければ空文字）"""
        try:
            data = response.json()
        except ValueError:
            return ""
        if not isinstance(data, dict):
            return ""
        error = data.get("error")
        if isinstance(error, dict):
            message = error.get("message")
        elif isinstance(error, str):
            message = error
        else:
            message = data.get("message")
        return f" - {message}" if message else ""

    # ========== HTTP client lifecycle ==========

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTPクライアントを取得（遅延初期化）"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """クライアントをクローズ"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ProviderAdapter":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"
