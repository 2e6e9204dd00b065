import asyncio
import os
from typing import Any, Awaitable, Iterable, List, Sequence, TypeVar

from mcfetch.exceptions import DirectoryCreationError

T = TypeVar("T")


def ensure_dir(path) -> None:
    """创建目录（已存在则忽略，可并发调用）"""
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(
            f"目录创建失败: {path}", context={"path": str(path), "error": str(e)}
        ) from e


def chunked(items: Sequence[T], size: int) -> List[Sequence[T]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


async def gather_fail_fast(aws: Iterable[Awaitable[Any]]) -> List[Any]:
    """
    并发执行全部任务，任一任务失败时取消其余任务并抛出该异常

    Returns:
        按输入顺序排列的结果列表
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []

    try:
        done, pending = await asyncio.wait(
            tasks, return_when=asyncio.FIRST_EXCEPTION
        )
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)

    first_error = None
    for task in tasks:
        if task in done and not task.cancelled() and task.exception() is not None:
            first_error = first_error or task.exception()
    if first_error is not None:
        raise first_error

    return [task.result() for task in tasks]
