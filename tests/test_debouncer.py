import asyncio

import pytest

from giveback.services.debouncer import Debouncer


@pytest.mark.asyncio
async def test_rapid_schedules_fire_once_with_last_value():
    fired = []
    debouncer = Debouncer(lambda value, ctx: fired.append(value), wait=0.01)

    for value in ("l", "la", "lam", "lamp"):
        debouncer.schedule(value, lambda: None)
    await debouncer.wait_idle()

    assert fired == ["lamp"]


@pytest.mark.asyncio
async def test_context_is_read_when_the_timer_fires():
    fired = []
    current = {"page": 1}
    debouncer = Debouncer(lambda value, ctx: fired.append((value, ctx)), wait=0.01)

    debouncer.schedule("lamp", lambda: current["page"])
    current["page"] = 4
    await debouncer.wait_idle()

    assert fired == [("lamp", 4)]


@pytest.mark.asyncio
async def test_cancel_drops_pending_call():
    fired = []
    debouncer = Debouncer(lambda value, ctx: fired.append(value), wait=0.01)

    debouncer.schedule("lamp", lambda: None)
    assert debouncer.pending
    debouncer.cancel()
    await asyncio.sleep(0.03)

    assert not debouncer.pending
    assert fired == []


@pytest.mark.asyncio
async def test_closed_debouncer_ignores_new_schedules():
    fired = []
    debouncer = Debouncer(lambda value, ctx: fired.append(value), wait=0.01)

    debouncer.schedule("lamp", lambda: None)
    debouncer.close()
    debouncer.schedule("chair", lambda: None)
    await asyncio.sleep(0.03)

    assert debouncer.closed
    assert fired == []
