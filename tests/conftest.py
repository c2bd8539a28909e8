from collections.abc import Generator
from pathlib import Path

import pytest

CREDENTIAL_VARS = ("OPENAI_API_KEY", "GEMINI_API_KEY", "ANTHROPIC_API_KEY", "GH_TOKEN")


@pytest.fixture(autouse=True)
def isolated_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    for name in CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep preference reads/writes inside the test's temp dir.
    monkeypatch.setenv("INSTITUTIONALIZED_CONFIG_HOME", str(tmp_path / "config"))
    yield


# Ensure no real provider calls escape during tests that don't explicitly
# stub httpx.post.
@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    import httpx

    def refuse_post(url, *args, **kwargs):  # noqa: D401
        raise AssertionError(f"unexpected network call to {url}")

    monkeypatch.setattr(httpx, "post", refuse_post)


class FakeDriver:
    """Duck-typed driver recording calls; behaviour set per instance."""

    def __init__(self, name, text="feat: add thing", error=None, delay=0.0):
        self.name = name
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    def _run(self, kind, prompt, deadline):
        import time

        self.calls.append((kind, prompt, deadline))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text

    def generate_commit_message(self, prompt, deadline):
        return self._run("commit", prompt, deadline).strip()

    def generate_content(self, prompt, deadline):
        return self._run("content", prompt, deadline)


@pytest.fixture
def fake_driver():
    return FakeDriver
