"""Sync orchestrator.

Drives a complete run: resolve every subscription into a playlist, write
local copies, make sure the base directory exists on the device, upload
the playlists and list the result.

Feed resolution runs on a bounded thread pool. All uploads wait until every
subscription has been resolved, and the directory check runs exactly once
before the first upload.
"""

import logging
import posixpath
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path

import requests
from pydantic import BaseModel, Field

from podsync.config.schema import Subscription, SyncConfig
from podsync.device.client import DeviceClient, RemoteEntry
from podsync.feeds.parser import RSSParser
from podsync.http import create_session
from podsync.playlist.m3u import Playlist
from podsync.utils.errors import DeviceApiError, FeedError, LocalIoError

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Step of the run at which a subscription failed."""

    CONFIG = "config"
    RESOLVE = "resolve"
    WRITE = "write"
    UPLOAD = "upload"


class SyncOptions(BaseModel):
    """Run options that come from the command line rather than the config file."""

    write_all: bool = False  # Write every playlist locally, not only those with `file`
    output_dir: Path = Field(default_factory=Path.cwd)
    upload: bool = True
    workers: int | None = Field(default=None, ge=1)


class SubscriptionResult(BaseModel):
    """Outcome of processing one subscription."""

    name: str
    playlist: Playlist | None = None
    local_path: Path | None = None
    remote_path: str | None = None
    failed_stage: Stage | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def fail(self, stage: Stage, error: Exception | str) -> "SubscriptionResult":
        self.failed_stage = stage
        self.error = str(error)
        return self


class SyncReport(BaseModel):
    """Summary of a sync run."""

    base_directory: str
    results: list[SubscriptionResult] = Field(default_factory=list)
    created_base_directory: bool = False
    remote_entries: list[RemoteEntry] = Field(default_factory=list)
    aborted: str | None = None  # Reason the upload phase was abandoned

    @property
    def failed(self) -> list[SubscriptionResult]:
        return [result for result in self.results if not result.ok]

    @property
    def ok(self) -> bool:
        return self.aborted is None and not self.failed


class SyncOrchestrator:
    """Runs a sync between configured podcast feeds and an ESPuino.

    Example:
        config = ConfigManager(Path("podsync.yaml")).load()
        with SyncOrchestrator(config) as orchestrator:
            report = orchestrator.run()
        if not report.ok:
            ...
    """

    def __init__(
        self,
        config: SyncConfig,
        options: SyncOptions | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Validated sync configuration
            options: Command-line run options
            session: HTTP session to use; one is created from the config if omitted
        """
        self.config = config
        self.options = options or SyncOptions()
        self.workers = self.options.workers or config.device.workers

        self._owns_session = session is None
        self.session = session or create_session(
            proxy=config.device.proxy, pool_size=max(10, self.workers)
        )

        timeout = config.device.timeout
        self.parser = RSSParser(self.session, timeout=timeout)
        self.device = DeviceClient(config.device.host, self.session, timeout=timeout)

    def __enter__(self) -> "SyncOrchestrator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session if this orchestrator created it."""
        if self._owns_session:
            self.session.close()

    @property
    def base_directory(self) -> str:
        return self.config.device.path

    @property
    def remote_base(self) -> str:
        """Base directory as the device API expects it, without trailing slash."""
        return self.base_directory.rstrip("/") or "/"

    def remote_path_for(self, name: str) -> str:
        return posixpath.join(self.base_directory, f"{name}.m3u")

    def local_path_for(self, subscription: Subscription) -> Path | None:
        """Where to write a subscription's playlist locally, if anywhere."""
        if subscription.local_file is not None:
            return subscription.local_file
        if self.options.write_all:
            return self.options.output_dir / subscription.playlist_filename
        return None

    def run(self) -> SyncReport:
        """Execute a full sync run.

        Returns:
            SyncReport describing every subscription and the device state
        """
        report = SyncReport(base_directory=self.base_directory)
        report.results = self.resolve_all()

        if not self.options.upload:
            logger.info("Upload disabled, skipping device sync")
            return report

        try:
            report.created_base_directory = self.ensure_base_directory()
        except DeviceApiError as e:
            logger.error(f"Pre-flight check against {self.config.device.host} failed: {e}")
            report.aborted = str(e)
            return report

        self.upload_playlists(report.results)

        try:
            report.remote_entries = self.device.list(self.remote_base)
        except DeviceApiError as e:
            logger.warning(f"Could not list {self.base_directory} after upload: {e}")

        return report

    def resolve_all(self) -> list[SubscriptionResult]:
        """Resolve every subscription, concurrently, preserving config order."""
        subscriptions = self.config.subscriptions
        results: list[SubscriptionResult] = []

        if subscriptions:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                # map() yields in submission order; each call handles its own errors
                results.extend(executor.map(self.process_subscription, subscriptions))

        for name, reason in self.config.invalid.items():
            results.append(SubscriptionResult(name=name).fail(Stage.CONFIG, reason))

        position = {name: index for index, name in enumerate(self.config.section_order)}
        results.sort(key=lambda result: position.get(result.name, len(position)))

        logger.info("Finished processing podcast feeds.")
        return results

    def process_subscription(self, subscription: Subscription) -> SubscriptionResult:
        """Resolve one subscription and write its local copy if requested.

        Never raises for feed or local write failures; they are recorded on
        the returned result.
        """
        name = subscription.name
        feed_url = str(subscription.feed_url)
        result = SubscriptionResult(name=name)
        logger.info(f'Processing podcast "{name}"')

        try:
            episodes = self.parser.resolve(
                feed_url,
                truncate=subscription.truncate,
                reverse=subscription.reverse,
            )
        except FeedError as e:
            logger.error(f'Error processing "{name}" from {feed_url}: {e}')
            return result.fail(Stage.RESOLVE, e)

        result.playlist = Playlist(name=name, episodes=tuple(episodes))

        local_path = self.local_path_for(subscription)
        if local_path is not None:
            logger.info(f"Writing playlist file: {local_path}")
            try:
                result.local_path = result.playlist.write(local_path)
            except LocalIoError as e:
                logger.error(f'Error writing playlist for "{name}": {e}')
                return result.fail(Stage.WRITE, e)

        logger.info(f'Finished processing podcast "{name}" ({len(episodes)} elements)')
        return result

    def ensure_base_directory(self) -> bool:
        """Create the base directory on the device if it is missing.

        Returns:
            True if the directory was created

        Raises:
            DeviceApiError: If the device cannot be queried or the mkdir fails
        """
        base = self.remote_base
        if base == "/":
            return False

        if self.device.exists_directory(base):
            logger.debug(f"Base directory {base} exists")
            return False

        self.device.mkdir(base)
        return True

    def upload_playlists(self, results: list[SubscriptionResult]) -> None:
        """Upload every resolved playlist, isolating failures per playlist."""
        for result in results:
            if result.playlist is None:
                continue

            remote_path = self.remote_path_for(result.name)
            logger.info(f"Uploading {remote_path}")
            try:
                self.device.upload(remote_path, result.playlist.to_bytes())
            except DeviceApiError as e:
                logger.error(f'Error uploading playlist for "{result.name}": {e}')
                if result.ok:
                    result.fail(Stage.UPLOAD, e)
                continue

            result.remote_path = remote_path
