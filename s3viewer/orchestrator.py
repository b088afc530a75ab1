"""Top-level retrieval flow: resolve a locator, download it, open it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from s3viewer import discovery
from s3viewer._errors import CancelledByUser, S3ViewerError
from s3viewer.config import S3ViewerConfig, build_env
from s3viewer.locator import validate
from s3viewer.logging import get_logger
from s3viewer.prompt import ConsolePrompter, Prompter
from s3viewer.store import ObjectStore, get_store
from s3viewer.transfer import fetch_to_temp
from s3viewer.viewer import ViewHandle, Viewer, content_type_for, get_viewer


class RetrievalState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    TRANSFERRING = "transferring"
    OPENING = "opening"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RetrievalResult:
    """Outcome of one retrieve() call.

    A cancelled flow ends in IDLE with no error.
    """

    state: RetrievalState
    locator: str | None = None
    path: Path | None = None
    handle: ViewHandle | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state is RetrievalState.DONE


class Retriever:
    """Runs the open-object flow against explicit configuration.

    Args:
        config: Loaded configuration.
        store: Backend used for listings and downloads (default: from config).
        viewer: Receives the downloaded file (default: from config).
        prompter: Pickers, text entry and messages (default: console).
        logger: Logger (default: configured from config.logging).
    """

    def __init__(
        self,
        config: S3ViewerConfig,
        store: ObjectStore | None = None,
        viewer: Viewer | None = None,
        prompter: Prompter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.store = store or get_store(config)
        self.viewer = viewer or get_viewer(config.viewer_command)
        self.prompter = prompter or ConsolePrompter()
        self.logger = logger or get_logger("s3viewer", config.logging)

    def _enter(self, state: RetrievalState) -> RetrievalState:
        self.logger.debug(f"Retrieval state: {state.value}")
        return state

    def _resolve(
        self, locator: str | None, discover: bool, env: dict[str, str]
    ) -> str:
        """Pick the locator: argument, configured default, pickers, text entry."""
        if locator is not None:
            return locator
        if self.config.default_locator:
            return self.config.default_locator
        if discover or self.config.discover_by_default:
            return discovery.discover(self.prompter, env, self.store).uri

        answer = self.prompter.ask("S3 URL (s3://bucket/key)")
        if not answer:
            raise CancelledByUser()
        return answer

    def _fail(
        self, error: S3ViewerError, locator: str | None, surface: bool
    ) -> RetrievalResult:
        self._enter(RetrievalState.FAILED)
        if surface:
            self.prompter.error(f"Error: {error}")
        return RetrievalResult(
            state=RetrievalState.FAILED, locator=locator, error=str(error)
        )

    def retrieve(
        self,
        locator: str | None = None,
        discover: bool = False,
        surface_errors: bool = True,
    ) -> RetrievalResult:
        """Resolve, download and open one object.

        Args:
            locator: Explicit s3:// URL; takes priority over everything else.
            discover: Use bucket/key pickers when no locator is configured.
            surface_errors: Show failures through the prompter.

        Returns:
            The final state. Failures are reported, not raised.
        """
        env = build_env(self.config)

        self._enter(RetrievalState.RESOLVING)
        raw: str | None = None
        try:
            raw = self._resolve(locator, discover, env)
            target = validate(raw)
        except CancelledByUser:
            self._enter(RetrievalState.IDLE)
            return RetrievalResult(state=RetrievalState.IDLE)
        except S3ViewerError as e:
            return self._fail(e, raw, surface_errors)

        self._enter(RetrievalState.TRANSFERRING)
        try:
            path = fetch_to_temp(
                target.uri, env, self.store, self.config.temp_dir or None
            )
        except S3ViewerError as e:
            return self._fail(e, target.uri, surface_errors)

        self._enter(RetrievalState.OPENING)
        try:
            handle = self.viewer.open(path, content_type_for(target))
        except S3ViewerError as e:
            return self._fail(e, target.uri, surface_errors)

        self._enter(RetrievalState.DONE)
        self.prompter.info(f"S3 file loaded: {target.uri}")
        return RetrievalResult(
            state=RetrievalState.DONE, locator=target.uri, path=path, handle=handle
        )


def on_startup(retriever: Retriever) -> RetrievalResult | None:
    """Run retrieve() once if auto_run_on_startup is set.

    Any error is logged at debug level and dropped.
    """
    if not retriever.config.auto_run_on_startup:
        return None
    try:
        return retriever.retrieve(surface_errors=False)
    except Exception as e:
        retriever.logger.debug(f"Startup retrieval failed: {e}")
        return None
