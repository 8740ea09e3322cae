import asyncio

from online_quiz.client.timer import SessionTimer, format_duration, format_time


def test_format_time():
    assert format_time(600) == "10:00"
    assert format_time(65) == "01:05"
    assert format_time(0) == "00:00"
    assert format_time(-3) == "00:00"


def test_format_duration():
    assert format_duration(125) == "2 min 5 sec"
    assert format_duration(0) == "0 min 0 sec"


def test_expiry_fires_once():
    calls = []

    async def scenario():
        timer = SessionTimer(3, lambda: calls.append("expired"), tick=0.001)
        timer.start()
        timer.start()
        await timer.wait()
        return timer

    timer = asyncio.run(scenario())
    assert calls == ["expired"]
    assert timer.remaining == 0
    assert timer.expired
    assert timer.display == "00:00"


def test_stop_prevents_expiry():
    calls = []

    async def scenario():
        timer = SessionTimer(60, lambda: calls.append("expired"), tick=0.001)
        timer.start()
        await asyncio.sleep(0.005)
        timer.stop()
        await timer.wait()
        return timer

    timer = asyncio.run(scenario())
    assert calls == []
    assert not timer.expired
    assert not timer.running
