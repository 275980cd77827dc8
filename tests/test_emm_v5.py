import pytest

from motorboard import emm_v5
from motorboard.emm_v5 import CanFrame, EmmV5Bus, RxMailbox, SysParam


def test_reset_position_bytes():
    assert emm_v5.reset_position(1) == bytes([0x01, 0x0A, 0x6D, 0x6B])


def test_reset_clog_protection_bytes():
    assert emm_v5.reset_clog_protection(2) == bytes([0x02, 0x0E, 0x52, 0x6B])


def test_synchronous_motion_broadcast():
    assert emm_v5.synchronous_motion(0) == bytes([0x00, 0xFF, 0x66, 0x6B])


def test_origin_interrupt_bytes():
    assert emm_v5.origin_interrupt(3) == bytes([0x03, 0x9C, 0x48, 0x6B])


def test_read_sys_params_velocity():
    assert emm_v5.read_sys_params(1, SysParam.VEL) == bytes([0x01, 0x35, 0x6B])


def test_read_sys_params_two_byte_codes():
    assert emm_v5.read_sys_params(1, SysParam.CONF) == bytes([0x01, 0x42, 0x6C, 0x6B])
    assert emm_v5.read_sys_params(1, SysParam.STATE) == bytes([0x01, 0x43, 0x7A, 0x6B])


def test_read_sys_params_unknown_raises():
    with pytest.raises(ValueError):
        emm_v5.read_sys_params(1, 4)


def test_position_control_layout():
    cmd = emm_v5.position_control(1, 0, 1000, 0, 3200, False, True)
    assert len(cmd) == 13
    assert cmd[:3] == bytes([0x01, 0xFD, 0x00])
    assert int.from_bytes(cmd[3:5], "big") == 1000
    assert int.from_bytes(cmd[6:10], "big") == 3200
    assert cmd[10:] == bytes([0x00, 0x01, 0x6B])


def test_velocity_control_layout():
    cmd = emm_v5.velocity_control(2, 1, 1100, 5, False)
    assert len(cmd) == 8
    assert cmd[1] == 0xF6
    assert int.from_bytes(cmd[3:5], "big") == 1100
    assert cmd[5] == 5
    assert cmd[-1] == 0x6B


def test_enable_and_stop_flags():
    assert emm_v5.enable_control(1, True, False) == bytes([0x01, 0xF3, 0xAB, 0x01, 0x00, 0x6B])
    assert emm_v5.stop_now(1, True) == bytes([0x01, 0xFE, 0x98, 0x01, 0x6B])


def test_origin_modify_params_layout():
    cmd = emm_v5.origin_modify_params(1, True, 2, 0, 30, 10000, 300, 800, 60, False)
    assert len(cmd) == 20
    assert cmd[1:3] == bytes([0x4C, 0xAE])
    assert int.from_bytes(cmd[6:8], "big") == 30
    assert int.from_bytes(cmd[8:12], "big") == 10000
    assert int.from_bytes(cmd[12:14], "big") == 300
    assert int.from_bytes(cmd[14:16], "big") == 800
    assert int.from_bytes(cmd[16:18], "big") == 60
    assert cmd[18:] == bytes([0x00, 0x6B])


def test_out_of_range_values_raise():
    with pytest.raises(ValueError):
        emm_v5.velocity_control(1, 0, 70000, 0, False)
    with pytest.raises(ValueError):
        emm_v5.position_control(1, 0, 100, 0, -1, False, False)
    with pytest.raises(ValueError):
        emm_v5.reset_position(256)


def test_split_short_command_single_frame():
    frames = emm_v5.split_frames(emm_v5.reset_position(5))
    assert frames == [CanFrame(0x0500, bytes([0x0A, 0x6D, 0x6B]))]


def test_split_long_command_reassembles():
    cmd = emm_v5.origin_modify_params(1, True, 2, 0, 30, 10000, 300, 800, 60, False)
    frames = emm_v5.split_frames(cmd)
    assert [f.ext_id for f in frames] == [0x0100, 0x0101, 0x0102]
    assert all(f.data[0] == 0x4C for f in frames)
    assert all(f.dlc <= 8 for f in frames)
    assert b"".join(f.data[1:] for f in frames) == cmd[2:]


def test_split_too_short_raises():
    with pytest.raises(ValueError):
        emm_v5.split_frames(b"\x01")


def test_mailbox_pads_and_clears():
    box = RxMailbox()
    assert box.take() is None
    box.deliver(3, b"\x36\x01\x02\x09\x09")
    dlc, data = box.take()
    assert dlc == 3
    assert data == b"\x36\x01\x02" + bytes(5)
    assert box.take() is None


def test_mailbox_rejects_bad_frames():
    box = RxMailbox()
    with pytest.raises(ValueError):
        box.deliver(9, b"")
    with pytest.raises(ValueError):
        box.deliver(8, bytes(9))


def test_bus_transmits_each_frame_with_gap():
    sent = []
    delays = []
    bus = EmmV5Bus(transmit=sent.append, delay=delays.append)
    cmd = emm_v5.position_control(1, 0, 1000, 0, 3200, False, False)
    frames = bus.send(cmd)
    assert sent == frames
    assert len(frames) == 2
    assert delays == [bus.frame_gap] * 2