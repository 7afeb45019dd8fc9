"""Upload progress reporting."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

__all__ = ["ProgressCallback", "upload_progress"]

ProgressCallback = Callable[[int, int], None]


@contextmanager
def upload_progress(enabled: bool, total: int, *, label: str = "Uploading") -> Iterator[
    ProgressCallback | None
]:
    """Yield a ``callback(sent, total)`` driving a Rich progress bar.

    Yields None when progress is disabled, so callers can pass the value
    straight to the gateway.
    """
    if not enabled:
        yield None
        return

    from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn, TransferSpeedColumn

    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        transient=True,
    ) as progress:
        task = progress.add_task(label, total=total)

        def update(sent: int, _total: int) -> None:
            progress.update(task, completed=sent)

        yield update
