"""Navigation state machine: fetch jobs, status handling and history."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote

from .content import Page, parse_content, plaintext_page
from .core.protocols import Fetcher
from .core.status import ServerResponse, StatusCategory
from .errors import MalformedStatusLine, TransportError, UnknownProtocol, UrlParseError
from .history import History
from .registry import Protocol, build_request, classify, is_plaintext_path
from .url import Url

logger = logging.getLogger(__name__)

INVALID_URL = "Invalid URL"

FAILURE_MESSAGE = (
    "The requested resource could not be found.\n\n"
    "Additional information:\n\n{detail}"
)

CERTIFICATE_MESSAGES = {
    "60": (
        "The requested resource requires a client certificate. "
        "You can create one with `smolnet identity new NAME`."
    ),
    "61": "Your client certificate is not authorized to access this resource.",
    "62": (
        "The requested resource is unavailable as your client certificate is invalid. "
        "Check to see if your certificate has expired."
    ),
}


class NavigationState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"


class NavigationOutcome(Enum):
    """Result of one state machine transition."""

    PENDING = "pending"
    RENDERED = "rendered"
    REDIRECTED = "redirected"
    INPUT_REQUESTED = "input_requested"
    ERROR = "error"
    IDLE = "idle"


@dataclass
class InputRequest:
    """A server's request for user input, pending submission."""

    prompt: str
    sensitive: bool
    destination: Url
    user_input: str = ""
    completed: bool = False


@dataclass(frozen=True)
class NavigationStep:
    """What happened in a navigation transition."""

    outcome: NavigationOutcome
    url: Url | None = None
    page: Page | None = None
    input_request: InputRequest | None = None
    message: str = ""


@dataclass
class NavigationJob:
    """An in-flight fetch."""

    task: asyncio.Task
    url: Url
    protocol: Protocol
    plaintext: bool
    generation: int
    added_to_history: bool = False
    plaintext_hint: bool = False


def _discard(task: asyncio.Task) -> None:
    """Retrieve a superseded job's outcome so it is never reported as unhandled."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("discarded stale navigation result: %s", exc)


class Navigator:
    """Owns the current URL, page, pending input and history of one session.

    Each navigation starts one background task. ``poll()`` checks it without
    blocking and returns the resulting transition once it has finished.
    Starting another navigation supersedes the current job: the old task
    keeps running, but its result is never observed.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        history: History | None = None,
        max_redirects: int = 5,
        language: str = "en",
    ):
        self.fetcher = fetcher
        self.history = history if history is not None else History()
        self.max_redirects = max_redirects
        self.language = language
        self.current_url: Url | None = None
        self.page: Page | None = None
        self.input_request: InputRequest | None = None
        self._job: NavigationJob | None = None
        self._generation = 0
        self._redirects = 0

    @property
    def state(self) -> NavigationState:
        return NavigationState.FETCHING if self._job is not None else NavigationState.IDLE

    def navigate(
        self,
        url: Url | str,
        protocol_hint: Protocol | None = None,
        add_to_history: bool = True,
        *,
        redirect: bool = False,
    ) -> NavigationStep:
        """Start navigating to a URL.

        Returns a PENDING step when a fetch was started, or an ERROR step
        when the URL cannot be fetched at all (no network I/O happens then).
        """
        self._supersede_job()
        if not redirect:
            self._redirects = 0

        try:
            target = url if isinstance(url, Url) else Url.parse(url)
        except UrlParseError as e:
            logger.debug("rejecting %r: %s", url, e)
            return self._show_error(INVALID_URL, None)

        protocol = classify(target)
        self.current_url = target
        if protocol == Protocol.UNKNOWN:
            logger.debug("rejecting %s: unknown protocol", target)
            return self._show_error(INVALID_URL, target)

        added = False
        if add_to_history:
            added = self.history.push(target, protocol_hint or protocol)

        try:
            request = build_request(
                target,
                protocol,
                plaintext=protocol_hint == Protocol.PLAINTEXT,
                language=self.language,
            )
        except UnknownProtocol:
            return self._show_error(INVALID_URL, target)

        logger.debug("navigating to %s (%s)", target, protocol.value)
        task = asyncio.create_task(self.fetcher.fetch(target, request, protocol))
        self._job = NavigationJob(
            task=task,
            url=target,
            protocol=protocol,
            plaintext=request.plaintext,
            generation=self._generation,
            added_to_history=added,
            plaintext_hint=protocol_hint == Protocol.PLAINTEXT,
        )
        return NavigationStep(NavigationOutcome.PENDING, url=target)

    def poll(self) -> NavigationStep | None:
        """Consume the current job if it has finished; None while pending or idle."""
        job = self._job
        if job is None or not job.task.done():
            return None
        self._job = None
        if job.generation != self._generation:
            _discard(job.task)
            return None
        return self._finish(job)

    async def wait(self) -> NavigationStep:
        """Wait for the current navigation, following redirects, to settle."""
        while True:
            job = self._job
            if job is None:
                return NavigationStep(NavigationOutcome.IDLE, url=self.current_url, page=self.page)
            await asyncio.wait({job.task})
            step = self.poll()
            if step is not None and step.outcome != NavigationOutcome.REDIRECTED:
                return step

    def back(self) -> NavigationStep:
        entry = self.history.back()
        if entry is None:
            return NavigationStep(NavigationOutcome.IDLE, url=self.current_url, page=self.page)
        return self.navigate(entry.url, entry.protocol, add_to_history=False)

    def forward(self) -> NavigationStep:
        entry = self.history.forward()
        if entry is None:
            return NavigationStep(NavigationOutcome.IDLE, url=self.current_url, page=self.page)
        return self.navigate(entry.url, entry.protocol, add_to_history=False)

    def reload(self) -> NavigationStep:
        if self.current_url is None:
            return NavigationStep(NavigationOutcome.IDLE)
        entry = self.history.current()
        hint = entry.protocol if entry is not None and entry.url == self.current_url else None
        return self.navigate(self.current_url, hint, add_to_history=False)

    def follow(self, target: str, plaintext: bool = False) -> NavigationStep:
        """Navigate to a link target relative to the current URL."""
        try:
            url = self._resolve(target)
        except UrlParseError:
            return self._show_error(INVALID_URL, None)
        hint = Protocol.PLAINTEXT if plaintext or is_plaintext_path(url.path) else None
        return self.navigate(url, hint)

    def submit_prompt(self, target: str, text: str) -> NavigationStep:
        """Submit a prompt line (or gopher search): the text becomes the query."""
        try:
            url = self._resolve(target)
        except UrlParseError:
            return self._show_error(INVALID_URL, None)
        return self.navigate(url.with_query(quote(text)))

    def submit_input(self, text: str) -> NavigationStep:
        """Answer the pending input request."""
        request = self.input_request
        if request is None:
            return NavigationStep(NavigationOutcome.IDLE, url=self.current_url, page=self.page)
        request.user_input = text
        request.completed = True
        self.input_request = None
        return self.navigate(request.destination.with_query(quote(text)))

    def cancel_input(self) -> None:
        self.input_request = None

    def _resolve(self, target: str) -> Url:
        if self.current_url is None:
            return Url.parse(target)
        return self.current_url.join(target)

    def _supersede_job(self) -> None:
        self._generation += 1
        if self._job is not None:
            self._job.task.add_done_callback(_discard)
            self._job = None

    def _finish(self, job: NavigationJob) -> NavigationStep:
        try:
            response = job.task.result()
        except asyncio.CancelledError:
            return NavigationStep(NavigationOutcome.IDLE, url=job.url, page=self.page)
        except TransportError as e:
            logger.debug("transport error for %s: %s", job.url, e)
            return self._show_error(e.message, job.url)
        except MalformedStatusLine as e:
            logger.warning("%s", e)
            return self._show_error(str(e), job.url)
        except Exception as e:
            logger.exception("fetching %s failed", job.url)
            return self._show_error(str(e), job.url)

        return self._handle_response(job, response)

    def _handle_response(self, job: NavigationJob, response: ServerResponse) -> NavigationStep:
        status = response.status
        category = status.category

        if category == StatusCategory.SUCCESS:
            self.page = parse_content(response.content, job.protocol, job.plaintext, job.url)
            return NavigationStep(NavigationOutcome.RENDERED, url=job.url, page=self.page)

        if category == StatusCategory.INPUT:
            # The URL asking for input is not a page of its own
            if job.added_to_history:
                self.history.remove_latest_entry()
            self.input_request = InputRequest(
                prompt=status.meta,
                sensitive=status.sensitive,
                destination=job.url.with_query(None),
            )
            return NavigationStep(
                NavigationOutcome.INPUT_REQUESTED,
                url=job.url,
                page=self.page,
                input_request=self.input_request,
            )

        if category == StatusCategory.REDIRECT:
            return self._redirect(job, status.meta)

        if category == StatusCategory.FAILURE:
            return self._show_error(FAILURE_MESSAGE.format(detail=status.meta), job.url)

        if category == StatusCategory.CERTIFICATE:
            return self._show_error(CERTIFICATE_MESSAGES[status.code.code], job.url)

        return self._show_error(
            f"The server responded with status {status.code.code} ({status.code.name}), "
            "which this client does not support.",
            job.url,
        )

    def _redirect(self, job: NavigationJob, target: str) -> NavigationStep:
        if self._redirects >= self.max_redirects:
            return self._show_error(
                f"Too many redirects (more than {self.max_redirects}); last target was {target}",
                job.url,
            )
        try:
            url = job.url.resolve_redirect(target)
        except UrlParseError:
            return self._show_error(f"{INVALID_URL}: {target}", job.url)

        self._redirects += 1
        logger.debug("redirect %d from %s to %s", self._redirects, job.url, url)
        hint = Protocol.PLAINTEXT if job.plaintext_hint or is_plaintext_path(url.path) else job.protocol
        step = self.navigate(url, hint, add_to_history=True, redirect=True)
        if step.outcome != NavigationOutcome.PENDING:
            return step
        return NavigationStep(NavigationOutcome.REDIRECTED, url=url, message=target)

    def _show_error(self, message: str, url: Url | None) -> NavigationStep:
        self.page = plaintext_page(message, url)
        return NavigationStep(NavigationOutcome.ERROR, url=url, page=self.page, message=message)
