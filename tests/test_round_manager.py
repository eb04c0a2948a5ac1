import asyncio
import threading

from essurvey.core.round_manager import run_sync


async def _thread_name():
    return threading.current_thread().name


def test_run_sync_uses_calling_thread_without_a_running_loop():
    assert run_sync(_thread_name()) == threading.current_thread().name


def test_run_sync_blocks_on_a_worker_thread_inside_a_running_loop():
    async def caller():
        return threading.current_thread().name, run_sync(_thread_name())

    outer, inner = asyncio.run(caller())

    assert inner != outer
