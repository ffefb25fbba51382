import asyncio

from sharenote.client.debounce import Debouncer


async def test_only_last_call_runs():
    debouncer = Debouncer()
    calls = []
    for i in range(5):
        debouncer.schedule("preview", 0.01, lambda i=i: calls.append(i))

    await debouncer.flush()
    assert calls == [4]


async def test_keys_are_independent():
    debouncer = Debouncer()
    calls = []
    debouncer.schedule("preview", 0.01, lambda: calls.append("preview"))
    debouncer.schedule("autosave", 0.01, lambda: calls.append("autosave"))

    await debouncer.flush()
    assert sorted(calls) == ["autosave", "preview"]


async def test_async_callback():
    debouncer = Debouncer()
    calls = []

    async def callback():
        await asyncio.sleep(0)
        calls.append("done")

    debouncer.schedule("share", 0, callback)
    await debouncer.flush()
    assert calls == ["done"]


async def test_cancel():
    debouncer = Debouncer()
    calls = []
    debouncer.schedule("preview", 0.01, lambda: calls.append(1))

    assert debouncer.is_pending("preview")
    assert debouncer.cancel("preview") is True
    assert debouncer.cancel("preview") is False
    await asyncio.sleep(0.02)
    assert calls == []


async def test_failing_callback_is_logged_not_raised():
    debouncer = Debouncer()

    def boom():
        raise RuntimeError("boom")

    debouncer.schedule("preview", 0, boom)
    await debouncer.flush()
    assert not debouncer.is_pending("preview")
