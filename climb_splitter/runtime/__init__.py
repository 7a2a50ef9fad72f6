from .poll_loop import AttachSession, PollLoop, TickOutcome

__all__ = ["AttachSession", "PollLoop", "TickOutcome"]
