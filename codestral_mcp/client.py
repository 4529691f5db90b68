"""
MistralClient - authenticated access to the Codestral and Mistral APIs.

One persistent httpx.AsyncClient per upstream target. Every call goes
through the same path:

    resolve(model) -> pacer.acquire() -> POST -> validate | translate error

Failures are raised as UpstreamError subclasses (see errors.py); nothing
is retried and no partial result is returned.
"""

import logging
from typing import Optional

import httpx

from codestral_mcp.config import (
    CHAT_COMPLETIONS_PATH,
    DEFAULT_CHAT_TEMPERATURE,
    DEFAULT_FIM_TEMPERATURE,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TOP_P,
    FIM_COMPLETIONS_PATH,
    REQUEST_TIMEOUT_SECONDS,
    get_api_key,
    get_codestral_base_url,
    get_mistral_base_url,
)
from codestral_mcp.errors import (
    AuthenticationFailed,
    CredentialConfigError,
    InvalidResponseShape,
    translate_response,
    translate_transport_error,
)
from codestral_mcp.models import (
    CODESTRAL_TARGET,
    DEFAULT_CODE_MODEL,
    MISTRAL_TARGET,
    UpstreamTarget,
    resolve,
)
from codestral_mcp.pacer import RequestPacer
from codestral_mcp.schema import ChatRequest, CompletionResponse, FimRequest, validate_completion

logger = logging.getLogger(__name__)


def _or_default(value, default):
    return default if value is None else value


class MistralClient:
    """
    Client for both Mistral upstreams.

    Usage:
        async with MistralClient(api_key) as client:
            await client.validate_api_key()
            result = await client.chat_completion(
                [{"role": "user", "content": "Hello"}],
                model="mistral-large-latest",
            )
            print(result.first_content())
    """

    def __init__(
        self,
        api_key: str,
        *,
        pacer: Optional[RequestPacer] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        codestral_base_url: Optional[str] = None,
        mistral_base_url: Optional[str] = None,
    ):
        """
        Args:
            api_key: Mistral API key (bearer credential)
            pacer: Shared RequestPacer; a default 100ms pacer if omitted
            timeout: Per-request timeout in seconds
            codestral_base_url: Override for the code-specialized target
            mistral_base_url: Override for the general-purpose target

        Raises:
            ValueError: If api_key is empty or blank
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty")
        self._api_key = api_key.strip()
        self._pacer = pacer or RequestPacer()
        self._timeout = timeout

        base_urls = {
            CODESTRAL_TARGET.name: codestral_base_url or CODESTRAL_TARGET.base_url,
            MISTRAL_TARGET.name: mistral_base_url or MISTRAL_TARGET.base_url,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._base_urls = base_urls
        self._clients: dict[str, httpx.AsyncClient] = {
            name: httpx.AsyncClient(base_url=url, headers=headers, timeout=timeout)
            for name, url in base_urls.items()
        }

    @classmethod
    def from_env(cls, pacer: Optional[RequestPacer] = None) -> "MistralClient":
        """
        Build a client from MISTRAL_API_KEY and the optional base URL overrides.

        Raises:
            ConfigError: If MISTRAL_API_KEY is missing
        """
        return cls(
            get_api_key(),
            pacer=pacer,
            codestral_base_url=get_codestral_base_url(),
            mistral_base_url=get_mistral_base_url(),
        )

    @property
    def pacer(self) -> RequestPacer:
        return self._pacer

    def base_url_for(self, target: UpstreamTarget) -> str:
        return self._base_urls[target.name]

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.aclose()

    async def __aenter__(self) -> "MistralClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ─────────────────────────────────────────────────────────────────
    # COMPLETIONS
    # ─────────────────────────────────────────────────────────────────

    async def chat_completion(
        self,
        messages: list[dict],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
        max_tokens: Optional[int] = None,
        stop: Optional[list[str]] = None,
    ) -> CompletionResponse:
        """
        POST /chat/completions on the target that serves `model`.

        Defaults: model codestral-latest, temperature 0.7, top_p 1,
        max_tokens 1000.
        """
        model = model or DEFAULT_CODE_MODEL
        target = resolve(model)
        request = ChatRequest(
            model=model,
            messages=messages,
            temperature=_or_default(temperature, DEFAULT_CHAT_TEMPERATURE),
            top_p=_or_default(top_p, DEFAULT_TOP_P),
            max_tokens=_or_default(max_tokens, DEFAULT_MAX_TOKENS),
            stop=stop,
        )
        return await self._post(target, CHAT_COMPLETIONS_PATH, request.to_payload())

    async def fim_completion(
        self,
        prompt: str,
        *,
        suffix: Optional[str] = None,
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
        max_tokens: Optional[int] = None,
        stop: Optional[list[str]] = None,
    ) -> CompletionResponse:
        """
        POST /fim/completions on the Codestral target.

        Always uses codestral-latest. Temperature defaults to 0 rather
        than chat's 0.7.
        """
        target = resolve(DEFAULT_CODE_MODEL)
        if not target.supports_fim:
            raise ValueError(f"Target '{target.name}' does not support fill-in-the-middle")
        request = FimRequest(
            model=DEFAULT_CODE_MODEL,
            prompt=prompt,
            suffix=suffix,
            temperature=_or_default(temperature, DEFAULT_FIM_TEMPERATURE),
            top_p=_or_default(top_p, DEFAULT_TOP_P),
            max_tokens=_or_default(max_tokens, DEFAULT_MAX_TOKENS),
            stop=stop,
        )
        return await self._post(target, FIM_COMPLETIONS_PATH, request.to_payload())

    async def validate_api_key(self) -> bool:
        """
        Probe the API key with a 1-token chat completion on Codestral.

        The Codestral endpoint has no /models listing, so a minimal
        completion is the cheapest authenticated call.

        Raises:
            CredentialConfigError: If the key is rejected (401)
            UpstreamError: Any other failure, with its own kind
        """
        try:
            await self.chat_completion(
                [{"role": "user", "content": "test"}],
                model=DEFAULT_CODE_MODEL,
                max_tokens=1,
            )
        except AuthenticationFailed as e:
            raise CredentialConfigError() from e
        logger.info("Successfully connected to Codestral API")
        return True

    # ─────────────────────────────────────────────────────────────────
    # TRANSPORT
    # ─────────────────────────────────────────────────────────────────

    async def _post(self, target: UpstreamTarget, path: str, payload: dict) -> CompletionResponse:
        client = self._clients[target.name]

        await self._pacer.acquire()
        logger.debug(
            f"POST {self.base_url_for(target)}{path} model={payload.get('model')} "
            f"max_tokens={payload.get('max_tokens')}"
        )

        try:
            response = await client.post(path, json=payload)
        except httpx.HTTPError as e:
            error = translate_transport_error(e)
            logger.warning(f"{target.name}{path}: {error.message}")
            raise error from e

        if not response.is_success:
            error = translate_response(response)
            logger.warning(f"{target.name}{path} returned {response.status_code}: {error.message}")
            raise error

        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseShape(
                f"Mistral API returned a non-JSON body (HTTP {response.status_code})"
            ) from e

        return validate_completion(data)
