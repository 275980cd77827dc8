from motorboard.pwm import CHANNEL_3, CHANNEL_4, PWM_ARR, PwmOutput


def test_disabled_output_is_zero():
    out = PwmOutput(enabled=False)
    assert out.set_output(500.0) == (0, 0)


def test_forward_uses_second_channel():
    out = PwmOutput(enabled=True)
    assert out.set_output(100.7) == (0, 100)


def test_reverse_uses_first_channel():
    out = PwmOutput(enabled=True)
    assert out.set_output(-200.0) == (200, 0)


def test_zero_clears_both():
    out = PwmOutput(enabled=True)
    out.set_output(300.0)
    assert out.set_output(0.0) == (0, 0)


def test_clamped_to_arr():
    out = PwmOutput(enabled=True)
    assert out.set_output(1e6) == (0, PWM_ARR)
    assert out.set_output(-1e6) == (PWM_ARR, 0)


def test_writes_every_channel():
    writes = []
    out = PwmOutput(write=lambda ch, ccr: writes.append((ch, ccr)), enabled=True)
    out.set_output(42.0)
    assert writes == [(CHANNEL_3, 0), (CHANNEL_4, 42)]