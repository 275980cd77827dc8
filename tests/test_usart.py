from motorboard.usart import BUFFER_SIZE, SerialReceiver, format_message


def _receiver():
    sent = []
    return SerialReceiver(transmit=sent.append), sent


def test_format_message():
    assert format_message("x=%d", 5) == b"x=5"


def test_format_message_truncates():
    assert len(format_message("%s", "a" * 300)) == BUFFER_SIZE - 1


def test_nothing_received():
    rx, sent = _receiver()
    assert rx.poll(1000) is None
    assert sent == []


def test_waits_for_idle():
    rx, sent = _receiver()
    for t, b in enumerate(b"hi"):
        rx.on_byte(b, t)
    assert rx.poll(50) is None
    assert sent == []


def test_echo_after_idle():
    rx, sent = _receiver()
    for t, b in enumerate(b"hi"):
        rx.on_byte(b, t)
    assert rx.poll(rx.rx_tick + rx.timeout + 1) == b"hi"
    assert sent == [b"recive : hi\n"]
    assert rx.index == 0
    assert rx.poll(10_000) is None


def test_stops_at_nul():
    rx, _ = _receiver()
    for b in b"a\x00b":
        rx.on_byte(b, 0)
    assert rx.poll(rx.timeout + 1) == b"a"


def test_full_buffer_wraps():
    rx, sent = _receiver()
    for _ in range(BUFFER_SIZE):
        rx.on_byte(ord("z"), 0)
    assert rx.index == 0
    assert rx.poll(rx.timeout + 1) is None