"""
On-demand pull request summaries.

A summary is produced by running the amp agent inside the instance's
repository with a short instruction. The call can take a minute, so it
runs on a worker thread; the worker posts a SummaryResult onto a
SummaryChannel and the UI thread drains the channel on its next tick.
Nothing is shared between the two threads except the channel.

There is no cancellation and no timeout: a call runs until the agent
exits.
"""

import itertools
import logging
import queue
from dataclasses import dataclass
from typing import List, Optional

from .config import DEFAULT_SUMMARIZER_COMMAND, DEFAULT_SUMMARIZER_PROMPT
from .protocols import SubprocessInterface

logger = logging.getLogger(__name__)

LOADING_TEMPLATE = "Loading summary for PR #{number}...\n\nPlease wait, {agent} is analyzing the PR."

_request_ids = itertools.count(1)


@dataclass(frozen=True)
class SummaryRequest:
    """Everything a summary worker needs, captured at trigger time."""

    request_id: int
    pr_number: int
    repo_path: str
    instance_id: str

    @classmethod
    def create(cls, pr_number: int, repo_path: str, instance_id: str) -> "SummaryRequest":
        return cls(
            request_id=next(_request_ids),
            pr_number=pr_number,
            repo_path=repo_path,
            instance_id=instance_id,
        )


@dataclass(frozen=True)
class SummaryResult:
    request_id: int
    pr_number: int
    text: str
    ok: bool


def build_prompt(pr_number: int, template: str = DEFAULT_SUMMARIZER_PROMPT) -> str:
    return template.format(number=pr_number)


def loading_message(pr_number: int, command: Optional[List[str]] = None) -> str:
    agent = (command or DEFAULT_SUMMARIZER_COMMAND)[0]
    return LOADING_TEMPLATE.format(number=pr_number, agent=agent)


def summarize_pull_request(
    request: SummaryRequest,
    runner: SubprocessInterface,
    command: Optional[List[str]] = None,
    prompt_template: str = DEFAULT_SUMMARIZER_PROMPT,
) -> SummaryResult:
    """Run the summarization agent for one PR (blocking).

    Failures are returned as readable text with ok=False; nothing raises.

    Args:
        request: Captured PR number and repo path
        runner: SubprocessInterface used to run the agent
        command: argv prefix; the prompt is appended as the last argument
        prompt_template: Instruction template with a {number} placeholder

    Returns:
        SummaryResult carrying either the agent's output or an error message
    """
    command = list(command or DEFAULT_SUMMARIZER_COMMAND)
    cmd = [*command, build_prompt(request.pr_number, prompt_template)]

    result = runner.run(cmd, cwd=request.repo_path)

    if result is None:
        text = f"Failed to run {command[0]}: command not found or could not be started"
        ok = False
    elif result['returncode'] == 0:
        text = result['stdout']
        ok = True
    else:
        text = f"Error summarizing PR:\n{result['stderr']}"
        ok = False

    logger.info(
        f"Summary request #{request.request_id} for PR #{request.pr_number} "
        f"finished ({'ok' if ok else 'failed'})"
    )
    return SummaryResult(
        request_id=request.request_id,
        pr_number=request.pr_number,
        text=text,
        ok=ok,
    )


class SummaryChannel:
    """Thread-safe mailbox from summary workers to the UI thread."""

    def __init__(self):
        self._queue: "queue.Queue[SummaryResult]" = queue.Queue()

    def post(self, result: SummaryResult) -> None:
        self._queue.put(result)

    def drain(self) -> List[SummaryResult]:
        """Return every posted result, oldest first, without blocking."""
        results = []
        while True:
            try:
                results.append(self._queue.get_nowait())
            except queue.Empty:
                return results
