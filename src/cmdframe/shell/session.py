"""Session frames and the frame stack.

Every running shell, the top-level one and each nested submenu, is a
``SessionFrame``. Frames are pushed when a session starts and popped when
its loop ends; the top of the stack is the current frame that
registration, lookup and the accessors act on.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Optional

from cmdframe.errors import NestingDepthExceeded, NoActiveSessionError, SessionStateError
from cmdframe.shell.parser import ArgList
from cmdframe.shell.registry import CommandHandler, CommandTable, RegistrySlice

logger = logging.getLogger(__name__)

UnknownCommandHandler = Callable[[str, Optional[ArgList]], int]


class FrameState(Enum):
    """Lifecycle of a session frame."""
    RUNNING = "running"
    TERMINATING = "terminating"
    POPPED = "popped"


@dataclass
class SessionFrame:
    """One shell session: its presentation, its commands and its state."""

    prompt: str
    intro: str
    doc_header: str
    undoc_header: str
    ruler: str
    registry: RegistrySlice
    empty_line_handler: CommandHandler
    unknown_command_handler: UnknownCommandHandler
    depth: int = 1
    state: FrameState = field(default=FrameState.RUNNING)

    @property
    def terminated(self) -> bool:
        """True once the loop driving this frame should stop."""
        return self.state is not FrameState.RUNNING

    def terminate(self) -> None:
        """Ask the dispatch loop to stop after the current command."""
        if self.state is FrameState.RUNNING:
            self.state = FrameState.TERMINATING
            logger.debug(f"Session at depth {self.depth} terminating")


class FrameStack:
    """Bounded stack of session frames.

    Each pushed frame gets a fresh registry slice directly after the
    previous frame's one; popping a frame releases its slice.
    """

    def __init__(self, table: CommandTable, max_depth: int, commands_per_frame: int):
        """Initialize stack.

        Args:
            table: Arena the frames' registry slices are carved from
            max_depth: Maximum number of frames alive at once
            commands_per_frame: Capacity of each frame's registry slice
        """
        self.table = table
        self.max_depth = max_depth
        self.commands_per_frame = commands_per_frame
        self._frames: List[SessionFrame] = []

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def current(self) -> SessionFrame:
        """The frame on top of the stack.

        Raises:
            NoActiveSessionError: If no session has been started
        """
        if not self._frames:
            raise NoActiveSessionError("No session is active; call start_session() first")
        return self._frames[-1]

    def push(
        self,
        prompt: str,
        intro: str,
        doc_header: str,
        undoc_header: str,
        ruler: str,
        empty_line_handler: CommandHandler,
        unknown_command_handler: UnknownCommandHandler,
    ) -> SessionFrame:
        """Create a frame and make it current.

        Returns:
            The new frame

        Raises:
            NestingDepthExceeded: If ``max_depth`` frames are already alive
        """
        if len(self._frames) >= self.max_depth:
            logger.critical(f"Session nesting depth {self.max_depth} exceeded")
            raise NestingDepthExceeded(
                f"Cannot start session: maximum nesting depth {self.max_depth} reached"
            )

        frame = SessionFrame(
            prompt=prompt,
            intro=intro,
            doc_header=doc_header,
            undoc_header=undoc_header,
            ruler=ruler,
            registry=self.table.open_slice(self.commands_per_frame),
            empty_line_handler=empty_line_handler,
            unknown_command_handler=unknown_command_handler,
            depth=len(self._frames) + 1,
        )
        self._frames.append(frame)
        logger.debug(f"Pushed session frame (depth {frame.depth})")
        return frame

    def pop(self, frame: Optional[SessionFrame] = None) -> None:
        """Pop a frame and release its registry slice.

        Popping an already popped frame does nothing.

        Args:
            frame: Frame to pop (default: the current frame)

        Raises:
            SessionStateError: If ``frame`` is alive but not on top
        """
        if frame is None:
            frame = self.current
        if frame.state is FrameState.POPPED:
            return
        if not self._frames or self._frames[-1] is not frame:
            raise SessionStateError(
                f"Cannot pop session at depth {frame.depth}: it is not the current session"
            )

        self.table.release(frame.registry)
        self._frames.pop()
        frame.state = FrameState.POPPED
        logger.debug(f"Popped session frame (depth {frame.depth})")

    @contextmanager
    def guard(self, frame: SessionFrame) -> Iterator[SessionFrame]:
        """Pop ``frame`` when the block exits, however it exits."""
        try:
            yield frame
        finally:
            self.pop(frame)
