from motorboard import emm_v5
from motorboard.emm_v5 import SysParam
from motorboard.motors import Motor, MotorGroup, decode_position


class RecordingBus:
    def __init__(self):
        self.commands = []

    def send(self, command):
        self.commands.append(command)
        return emm_v5.split_frames(command)


def test_decode_position_positive_and_negative():
    data = bytes([0x36, 0x00, 0x00, 0x01, 0x00, 0x00, 0x6B, 0x00])
    assert decode_position(7, data) == 360.0
    neg = bytes([0x36, 0x01, 0x00, 0x01, 0x00, 0x00, 0x6B, 0x00])
    assert decode_position(7, neg) == -360.0


def test_decode_position_zero():
    assert decode_position(7, bytes([0x36, 0, 0, 0, 0, 0, 0x6B, 0])) == 0.0


def test_decode_position_rejects_other_frames():
    data = bytes([0x36, 0x00, 0x00, 0x01, 0x00, 0x00, 0x6B, 0x00])
    assert decode_position(6, data) is None
    assert decode_position(7, bytes([0x35]) + data[1:]) is None


def test_default_motors():
    group = MotorGroup(RecordingBus())
    assert [(m.addr, m.vel_set, m.clk_set) for m in group.motors] == [(1, 1100, 2000), (2, 1100, 1000)]


def test_request_speed_sends_read():
    bus = RecordingBus()
    MotorGroup(bus).request_speed()
    assert bus.commands == [emm_v5.read_sys_params(1, SysParam.VEL)]


def test_read_position_updates_first_motor():
    bus = RecordingBus()
    group = MotorGroup(bus)
    data = bytes([0x36, 0x01, 0x00, 0x01, 0x00, 0x00, 0x6B, 0x00])
    assert group.read_position(7, data) == -360.0
    assert group.motors[0].position == -360.0
    assert bus.commands == [emm_v5.read_sys_params(1, SysParam.CPOS)]


def test_read_position_ignores_bad_reply():
    group = MotorGroup(RecordingBus())
    group.motors[0].position = 12.5
    assert group.read_position(3, bytes(8)) is None
    assert group.motors[0].position == 12.5


def test_set_speeds_sequence_and_delays():
    bus = RecordingBus()
    delays = []
    group = MotorGroup(bus, delay=delays.append)
    group.set_speeds()
    expected = [
        emm_v5.velocity_control(m.addr, m.direction, m.vel_set, m.acceleration, m.sync)
        for m in group.motors
    ] + [emm_v5.synchronous_motion(0)]
    assert bus.commands == expected
    assert len(delays) == 3


def test_task_sends_only_on_change():
    bus = RecordingBus()
    group = MotorGroup(bus, motors=[Motor(addr=1, vel_set=500, clk_set=800), Motor(addr=2, vel_set=600, clk_set=900)])
    assert group.task() is True
    assert bus.commands == [
        emm_v5.position_control(1, 0, 500, 0, 800, False, True),
        emm_v5.position_control(2, 0, 600, 0, 900, False, True),
        emm_v5.synchronous_motion(0),
    ]
    bus.commands.clear()
    assert group.task() is False
    assert bus.commands == []
    group.motors[1].clk_set = 950
    assert group.task() is True
    assert bus.commands[1] == emm_v5.position_control(2, 0, 600, 0, 950, False, True)


def test_task_with_zero_setpoints_does_nothing():
    bus = RecordingBus()
    group = MotorGroup(bus, motors=[Motor(addr=1), Motor(addr=2)])
    assert group.task() is False
    assert bus.commands == []