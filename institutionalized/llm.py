"""Multi-provider invocation with per-attempt deadlines and fallback.

``ProviderManager`` walks an ordered list of drivers strictly one at a
time. The first success wins; failures (deadline, transport, provider
error, empty response) move on to the next driver and only the last one
is surfaced, wrapped with that driver's name.

Known limitation: an abandoned attempt's worker thread is not killed, it
just stops being waited for. The driver's own HTTP timeout bounds how long
it lingers. User interrupts get the interpreter's default handling.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence, TypeVar

from .config import (
    PROVIDER_ORDER,
    PROVIDERS,
    Preferences,
    detect_available_providers,
)
from .exceptions import (
    AllProvidersFailedError,
    DeadlineExceededError,
    NoProvidersError,
)
from .parsing import parse_pr_response
from .prompts import build_commit_prompt, build_pr_prompt
from .providers import DRIVERS, BaseDriver

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CommitMessageResult:
    message: str
    provider: str


@dataclass(frozen=True)
class PRContentResult:
    title: str
    body: str
    provider: str


class ProviderManager:
    """Ordered fallback chain over drivers sharing one per-attempt deadline."""

    def __init__(self, providers: Sequence[BaseDriver], deadline: float) -> None:
        if deadline <= 0:
            raise ValueError("deadline must be positive")
        names = [p.name for p in providers]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(
                "duplicate providers in chain: {}".format(", ".join(sorted(duplicates)))
            )
        self._providers = tuple(providers)
        self.deadline = float(deadline)

    @property
    def provider_names(self) -> list[str]:
        return [p.name for p in self._providers]

    def generate_commit_message(
        self, diff: str, use_emoji: bool
    ) -> CommitMessageResult:
        prompt = build_commit_prompt(diff, use_emoji)
        text, provider = self._run_chain(
            lambda driver: driver.generate_commit_message(prompt, self.deadline)
        )
        return CommitMessageResult(message=text, provider=provider)

    def generate_pr_content(
        self,
        commits: str,
        current_branch: str,
        default_branch: str,
        use_emoji: bool,
        template_text: str = "",
    ) -> PRContentResult:
        """Generate a PR title and body.

        The response is parsed after the chain has produced a success. A
        parse failure is final and is not retried on another backend.
        """
        prompt = build_pr_prompt(
            commits, current_branch, default_branch, template_text, use_emoji
        )
        raw, provider = self._run_chain(
            lambda driver: driver.generate_content(prompt, self.deadline)
        )
        parsed = parse_pr_response(raw)
        return PRContentResult(title=parsed.title, body=parsed.body, provider=provider)

    def _run_chain(self, call: Callable[[BaseDriver], T]) -> tuple[T, str]:
        if not self._providers:
            raise NoProvidersError()

        last_index = len(self._providers) - 1
        for index, driver in enumerate(self._providers):
            started = time.monotonic()
            try:
                result = self._attempt(driver, call)
            except Exception as exc:  # noqa: BLE001 - any failure falls back
                elapsed = time.monotonic() - started
                if isinstance(exc, DeadlineExceededError):
                    logger.warning(
                        "%s timed out after %.1fs (deadline %gs)",
                        driver.name,
                        elapsed,
                        self.deadline,
                    )
                else:
                    logger.warning(
                        "%s failed after %.1fs: %s: %s",
                        driver.name,
                        elapsed,
                        type(exc).__name__,
                        exc,
                    )
                if index == last_index:
                    raise AllProvidersFailedError(driver.name, exc) from exc
                logger.info(
                    "Falling back from %s to %s",
                    driver.name,
                    self._providers[index + 1].name,
                )
                continue
            logger.debug(
                "%s succeeded in %.1fs", driver.name, time.monotonic() - started
            )
            return result, driver.name
        raise AssertionError("unreachable")  # pragma: no cover

    def _attempt(self, driver: BaseDriver, call: Callable[[BaseDriver], T]) -> T:
        # Fresh worker per attempt so a stuck call never delays the next one.
        executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"llm-{driver.name}"
        )
        try:
            future = executor.submit(call, driver)
            try:
                return future.result(timeout=self.deadline)
            except FuturesTimeoutError:
                future.cancel()
                raise DeadlineExceededError(driver.name, self.deadline) from None
        finally:
            executor.shutdown(wait=False, cancel_futures=True)


def build_provider_chain(
    preferences: Preferences,
    env: Optional[Mapping[str, str]] = None,
    api_key_override: Optional[str] = None,
) -> list[BaseDriver]:
    """Instantiate enabled drivers that have a credential, priority first.

    ``api_key_override`` stands in for the OpenAI credential (legacy
    ``--api-key`` flag). An unknown priority is ignored and the fixed
    tie-break order applies.
    """
    env_dict = os.environ if env is None else env
    settings = preferences.providers

    order = list(PROVIDER_ORDER)
    if settings.priority in order:
        order.remove(settings.priority)
        order.insert(0, settings.priority)
    elif settings.priority:
        logger.debug("Ignoring unknown provider priority %r", settings.priority)

    available = set(detect_available_providers(env_dict))
    if api_key_override:
        available.add("openai")

    chain: list[BaseDriver] = []
    for key in order:
        if not settings.is_enabled(key):
            logger.debug("Skipping %s: disabled in preferences", key)
            continue
        if key not in available:
            logger.debug(
                "Skipping %s: %s not set", key, PROVIDERS[key]["api_key_env"]
            )
            continue
        api_key = env_dict.get(PROVIDERS[key]["api_key_env"], "").strip()
        if key == "openai" and api_key_override:
            api_key = api_key_override
        chain.append(DRIVERS[key](api_key))
    return chain


def manager_from_preferences(
    preferences: Preferences,
    env: Optional[Mapping[str, str]] = None,
    api_key_override: Optional[str] = None,
) -> ProviderManager:
    providers = build_provider_chain(preferences, env, api_key_override)
    return ProviderManager(providers, preferences.providers.delay_threshold)
