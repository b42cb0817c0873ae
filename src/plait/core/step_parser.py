"""Workflow document parsing for plait.

A workflow document is markdown where each ``### Step N: Title`` heading
starts a step. Everything up to the next such heading belongs to the step,
except inside fenced code blocks: examples embedded in a step may contain
headings, fences and markers of their own, so fence depth is tracked with a
counter and structure is only recognised at depth zero.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import ConflictingMarkersError, DocumentDecodeError, DocumentNotFoundError
from ..models import StepKind, WorkflowStep

logger = logging.getLogger(__name__)

STEP_HEADER_PATTERN = re.compile(r"^###\s+Step\s+\d+:\s+(.+?)(?:\s+\[.*\])*\s*$")
WORKFLOW_MARKER_PATTERN = re.compile(r"^<!--\s*(?:runner:)?workflow:\s*(.+?)\s*-->$")
LOOP_MARKER_PATTERN = re.compile(r"^<!--\s*(?:runner:)?loop:\s*(.+?)\s*-->$")
FENCE_TOKEN = "```"


def slugify(title: str) -> str:
    """Create a step slug from its title."""
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def is_fence(line: str) -> bool:
    """Return True if the line opens or closes a fenced code block."""
    return line.strip().startswith(FENCE_TOKEN)


def fence_delta(line: str, depth: int) -> int:
    """Return the change in fence depth caused by a line.

    A fence with an info string (```bash) always opens a block. A bare fence
    closes the innermost block when one is open, and opens one otherwise.
    """
    if not is_fence(line):
        return 0
    if line.strip().strip("`"):
        return 1
    return -1 if depth > 0 else 1


def _read_fenced_block(lines: list[str], start: int) -> tuple[str | None, int]:
    """Read the fenced block following a loop marker.

    Only blank lines may separate the marker from the block.

    Returns:
        Tuple of (block content, or None when no block follows, and the index
        of the first unconsumed line)
    """
    i = start
    while i < len(lines) and not lines[i].strip():
        i += 1
    if i >= len(lines) or not is_fence(lines[i]):
        return None, start

    i += 1
    block: list[str] = []
    while i < len(lines) and not is_fence(lines[i]):
        block.append(lines[i])
        i += 1
    # Skip the closing fence
    return "\n".join(block).strip(), i + 1


@dataclass
class _StepBuilder:
    """Accumulates one step while its lines are scanned."""

    name: str
    line_number: int
    workflow_name: str
    strict_markers: bool
    kind: StepKind = StepKind.TASK
    target_workflow: str | None = None
    loop_command: str | None = None
    loop_variable: str | None = None
    body: list[str] = field(default_factory=list)

    def mark(self, kind: StepKind) -> None:
        if self.kind is not StepKind.TASK:
            if self.strict_markers:
                raise ConflictingMarkersError(self.workflow_name, self.name, self.line_number)
            logger.warning(
                "Step '%s' (%s.md, line %d) has more than one marker; using the last (%s)",
                self.name,
                self.workflow_name,
                self.line_number,
                kind.value,
            )
        self.kind = kind
        self.target_workflow = None
        self.loop_command = None
        self.loop_variable = None

    def build(self) -> WorkflowStep:
        return WorkflowStep(
            id=slugify(self.name),
            name=self.name,
            kind=self.kind,
            body="\n".join(self.body).strip(),
            target_workflow=self.target_workflow,
            loop_command=self.loop_command,
            loop_variable=self.loop_variable,
            source_workflow=self.workflow_name,
            line_number=self.line_number,
        )


def parse_steps(
    content: str,
    workflow_name: str,
    *,
    strict_markers: bool = True,
) -> list[WorkflowStep]:
    """Parse workflow markdown into ordered steps.

    Args:
        content: Workflow document content
        workflow_name: Name recorded as each step's source workflow
        strict_markers: Raise on steps with more than one marker instead of
            letting the last marker win

    Returns:
        Steps in document order

    Raises:
        ConflictingMarkersError: If strict_markers is set and a step has two markers
    """
    lines = content.split("\n")
    steps: list[WorkflowStep] = []
    current: _StepBuilder | None = None
    depth = 0
    i = 0

    while i < len(lines):
        line = lines[i]

        if depth == 0:
            header = STEP_HEADER_PATTERN.match(line)
            if header:
                if current is not None:
                    steps.append(current.build())
                current = _StepBuilder(
                    name=header.group(1).strip(),
                    line_number=i + 1,
                    workflow_name=workflow_name,
                    strict_markers=strict_markers,
                )
                i += 1
                continue

            if current is not None:
                stripped = line.strip()
                workflow_marker = WORKFLOW_MARKER_PATTERN.match(stripped)
                if workflow_marker:
                    current.mark(StepKind.NESTED_WORKFLOW)
                    current.target_workflow = workflow_marker.group(1)
                    i += 1
                    continue

                loop_marker = LOOP_MARKER_PATTERN.match(stripped)
                if loop_marker:
                    current.mark(StepKind.LOOP)
                    current.loop_variable = loop_marker.group(1)
                    current.loop_command, i = _read_fenced_block(lines, i + 1)
                    continue

        depth = max(depth + fence_delta(line, depth), 0)
        if current is not None:
            current.body.append(line)
        i += 1

    if current is not None:
        steps.append(current.build())

    if depth:
        logger.debug("%s.md ends inside a fenced block (depth %d)", workflow_name, depth)

    return steps


class WorkflowParser:
    """Reads workflow documents from a directory and parses their steps."""

    def __init__(self, workflows_dir: Path, *, strict_markers: bool = True) -> None:
        self.workflows_dir = workflows_dir
        self.strict_markers = strict_markers

    def document_path(self, workflow_name: str) -> Path:
        return self.workflows_dir / f"{workflow_name}.md"

    def parse(self, workflow_name: str) -> list[WorkflowStep]:
        """Parse the document backing a workflow name.

        Raises:
            DocumentNotFoundError: If <workflows_dir>/<workflow_name>.md does not exist
            DocumentDecodeError: If the document is not valid UTF-8
            ConflictingMarkersError: If a step has more than one marker (strict mode)
        """
        path = self.document_path(workflow_name)
        if not path.is_file():
            raise DocumentNotFoundError(workflow_name, path)

        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DocumentDecodeError(workflow_name, path, str(e)) from e

        steps = parse_steps(
            content,
            workflow_name,
            strict_markers=self.strict_markers,
        )
        logger.debug("Parsed %d steps from %s", len(steps), path)
        return steps

    def workflow_names(self) -> list[str]:
        """Return the names of all workflow documents, sorted."""
        if not self.workflows_dir.is_dir():
            return []
        return sorted(p.stem for p in self.workflows_dir.glob("*.md") if p.is_file())
